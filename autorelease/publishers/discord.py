"""Discord webhook notifier."""

import http.client
import json
import urllib.error
import urllib.request

from autorelease import __version__
from autorelease.exceptions import NotificationError
from autorelease.publishers.base import Notifier


class DiscordNotifier(Notifier):
    """Posts {"content": message} to a Discord (or compatible) webhook."""

    def __init__(self, webhook_url: str, timeout: int = 30) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout

    def notify(self, message: str) -> None:
        try:
            req = urllib.request.Request(
                self.webhook_url,
                data=json.dumps({"content": message}).encode("utf-8"),
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": f"autorelease/{__version__}",
                },
                method="POST",
            )
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                response.read()
        except urllib.error.HTTPError as e:
            raise NotificationError(
                f"Webhook rejected the notification with HTTP {e.code}",
                details=e.reason,
            ) from e
        except urllib.error.URLError as e:
            raise NotificationError(
                "Webhook could not be reached",
                details=str(e.reason),
            ) from e
        except TimeoutError as e:
            raise NotificationError("Webhook timed out") from e
        except ValueError as e:
            raise NotificationError(
                "Invalid webhook URL",
                details=str(e),
                fix_hint="DISCORD_WEBHOOK must be an absolute http(s) URL",
            ) from e
        except (OSError, http.client.HTTPException) as e:
            raise NotificationError(
                "Webhook connection failed",
                details=f"{type(e).__name__}: {e}",
            ) from e
