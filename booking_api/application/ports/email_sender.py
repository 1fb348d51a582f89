from abc import ABC, abstractmethod


class EmailSenderPort(ABC):
    @abstractmethod
    def send_message(self, to: str, subject: str, html_body: str, from_name: str | None = None) -> str | None:
        """Send an HTML message. Returns the provider message id when known."""
        raise NotImplementedError
