"""Console core for rconweb.

Dispatches operator commands through a transport, decodes and classifies
the replies, and keeps the pending count and the history of exchanges.

Public API:
    ConsoleController -- Orchestrates dispatch and history
    FormattingDecoder -- Reply formatting codes to HTML
    StatusClassifier -- Reply to status tag via glob rules
    PendingTracker -- In-flight count with debounced loader flag
    HistoryLedger -- Newest-first record collection
    ObservableValue -- Published state container
"""

from rconweb.console.classifier import StatusClassifier
from rconweb.console.controller import ConsoleController
from rconweb.console.decoder import FormattingDecoder, strip_codes
from rconweb.console.history import HistoryLedger, is_resendable
from rconweb.console.observable import ObservableValue
from rconweb.console.tracker import PendingTracker

__all__ = [
    "ConsoleController",
    "FormattingDecoder",
    "HistoryLedger",
    "ObservableValue",
    "PendingTracker",
    "StatusClassifier",
    "is_resendable",
    "strip_codes",
]
