from dataclasses import dataclass


@dataclass(frozen=True)
class LoginAttempt:
	username: str = ""
	ip_address: str = ""
	timestamp: str = ""      # kept exactly as entered, never parsed
	success: bool = False

	@property
	def sort_key(self) -> str:
		"""Username compared case-insensitively."""
		return self.username.casefold()

	def __str__(self) -> str:
		return (
			f"User: {self.username} | IP: {self.ip_address} | "
			f"Time: {self.timestamp} | Success: {str(self.success).lower()}"
		)


@dataclass(frozen=True)
class Alert:
	ip_address: str = ""
	message: str = ""
	timestamp: str = ""

	def __str__(self) -> str:
		return f"[ALERT] IP: {self.ip_address} | {self.message} | Time: {self.timestamp}"
