from .correlator import Correlator
from .replies import HANDLERS, ReplyHandler, ACCEPTED_CATEGORIES

__all__ = ["ACCEPTED_CATEGORIES", "Correlator", "HANDLERS", "ReplyHandler"]
