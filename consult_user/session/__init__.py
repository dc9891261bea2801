"""Dialog session orchestration."""

from consult_user.session.guard import SingleFlight
from consult_user.session.heartbeat import WAITING_MESSAGE, Heartbeat, ProgressSink
from consult_user.session.orchestrator import ConsultSession
from consult_user.session.requests import AskRequest, unescape_literals

__all__ = [
    "AskRequest",
    "ConsultSession",
    "Heartbeat",
    "ProgressSink",
    "SingleFlight",
    "WAITING_MESSAGE",
    "unescape_literals",
]
