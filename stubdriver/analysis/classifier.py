"""
Message classification module.

Sequence diagram exports do not reliably distinguish calls from replies,
so the call/return decision is made by an ordered list of rules over the
declared message type and the message text. Each rule is a named predicate
that can be tested on its own; the first rule that fires decides.

This is a best-effort heuristic. It misclassifies some names in both
directions (for example a call named "balance" reads as a reply, and a
reply labelled "deposit completed" reads as a call).
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from stubdriver.core.enums import MessageKind, MessageRole

logger = logging.getLogger(__name__)

RETURN_DECLARED_TYPES = frozenset({"return", "reply", "response"})

_RETURN_KEYWORD = re.compile(
    r"^\s*(return|reply|response)\b|\b(returns?|returned|returning|reply|replies|response)\b",
    re.IGNORECASE,
)

_RETURN_LITERAL_PATTERNS = [
    re.compile(r"^(void|null|none|nil|undefined)$", re.IGNORECASE),
    re.compile(r"^[A-Za-z_]\w*\s+object$", re.IGNORECASE),
    re.compile(r"^[A-Za-z_][\w.]*(\[\])+$"),
    re.compile(r"^[A-Za-z_][\w.]*\s*<[\w\s,.<>\[\]?]*>$"),
    re.compile(r"^[A-Za-z_][\w.]*\s*([+\-*/%]=|=(?!=)\s*[\w.]+\s*[+\-*/%]\s*[\w.]+)[^()]*$"),
    re.compile(r"^(true|false)$", re.IGNORECASE),
    re.compile(r"^[-+]?\d+(\.\d+)?([eE][-+]?\d+)?[lLfFdD]?$"),
    re.compile(r"^(\".*\"|'.*')$", re.DOTALL),
    re.compile(r"^\{.*\}$", re.DOTALL),
    re.compile(r"^\[.*\]$", re.DOTALL),
]

_CALL_EXPRESSION = re.compile(r"(?:([A-Za-z_]\w*)\s*\.\s*)?([A-Za-z_]\w*)\s*\(")

SIDE_EFFECT_VERBS = (
    "send", "emit", "publish", "notify", "broadcast", "dispatch",
    "log", "print", "trace", "audit", "display", "show",
    "cleanup", "clean", "dispose", "close", "release", "flush", "destroy",
)

MUTATION_VERBS = (
    "set", "update", "put", "add", "remove", "delete", "insert",
    "save", "store", "write", "increment", "decrement", "reset", "clear",
)

SIDE_EFFECT_RECEIVERS = frozenset({
    "cache", "storage", "store", "log", "logger", "db", "database", "repo", "repository",
})

CALL_VERBS = (
    "get", "find", "fetch", "load", "read", "query", "search", "lookup", "retrieve",
    "create", "build", "make", "new", "generate",
    "process", "handle", "execute", "run", "perform", "apply",
    "validate", "verify", "check", "authenticate", "authorize",
    "calculate", "compute", "evaluate",
    "connect", "open", "request", "submit", "register", "login", "logout",
    "deposit", "withdraw", "transfer", "pay", "charge", "refund",
    "init", "initialize", "start", "stop", "select", "confirm", "approve", "place",
    "order", "book", "cancel", "issue", "scan", "enter",
)

RETURN_INDICATORS = frozenset({
    "ok", "success", "successful", "failure", "failed", "fail", "error", "done",
    "ack", "nack", "result", "results", "status", "confirmation", "confirmed",
    "valid", "invalid", "approved", "denied", "rejected", "accepted", "found",
    "notfound", "empty", "balance", "data", "details", "info", "response", "yes", "no",
})

_RETURN_OPERATORS = re.compile(r"->|=>|==|!=|>=|<=|:=")

# Bound operations are named without parentheses
_IDENTIFIER = re.compile(r"^[A-Za-z_]\w*$")

SHORT_MESSAGE_WORDS = 3


def _words(text: str) -> List[str]:
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", text)
    return [w for w in re.split(r"[^A-Za-z0-9]+", spaced.lower()) if w]


def _starts_with_verb(identifier: str, verbs) -> bool:
    words = _words(identifier)
    return bool(words) and words[0] in verbs


def declared_return(kind: Union[MessageKind, str], name: str) -> bool:
    """The export declares the message a return/reply/response."""
    value = kind.value if isinstance(kind, MessageKind) else str(kind or "")
    return value.strip().lower() in RETURN_DECLARED_TYPES


def declared_create(kind: Union[MessageKind, str], name: str) -> bool:
    """A create message constructs the callee, which is a forward call."""
    value = kind.value if isinstance(kind, MessageKind) else str(kind or "")
    return value == MessageKind.CREATE.value


def unlabelled_synch_call(kind: Union[MessageKind, str], name: str) -> bool:
    """A synchronous call arrow with no label."""
    value = kind.value if isinstance(kind, MessageKind) else str(kind or "")
    return value == MessageKind.SYNCH_CALL.value and not (name or "").strip()


def return_keyword(kind, name: str) -> bool:
    """The text leads with or contains return/reply/response."""
    return bool(_RETURN_KEYWORD.search(name or ""))


def return_literal(kind, name: str) -> bool:
    """The text looks like a returned value or type rather than a call."""
    text = (name or "").strip()
    return any(pattern.match(text) for pattern in _RETURN_LITERAL_PATTERNS)


def _call_match(name: str):
    return _CALL_EXPRESSION.search(name or "")


def has_call_expression(kind, name: str) -> bool:
    """The text contains identifier(...)."""
    return _call_match(name) is not None


def side_effect_action(kind, name: str) -> bool:
    """A call to a terminal side-effecting action such as send or log."""
    match = _call_match(name)
    return bool(match) and _starts_with_verb(match.group(2), SIDE_EFFECT_VERBS)


def side_effect_mutation(kind, name: str) -> bool:
    """A state mutation on a cache, storage, log, db or repository receiver."""
    match = _call_match(name)
    if not match or not _starts_with_verb(match.group(2), MUTATION_VERBS):
        return False
    receiver_words = _words(match.group(1) or "") + _words(match.group(2))[1:]
    return any(word in SIDE_EFFECT_RECEIVERS for word in receiver_words)


def known_call_verb(kind, name: str) -> bool:
    """A call whose method starts with a known call verb."""
    match = _call_match(name)
    return bool(match) and _starts_with_verb(match.group(2), CALL_VERBS)


def call_verb_identifier(kind, name: str) -> bool:
    """A bare operation name such as getBalance that starts with a known call verb."""
    text = (name or "").strip()
    return bool(_IDENTIFIER.match(text)) and _starts_with_verb(text, CALL_VERBS)


def return_indicator(kind, name: str) -> bool:
    """Text without parentheses that names a result or uses a result operator."""
    text = (name or "").strip()
    if _RETURN_OPERATORS.search(text):
        return True
    words = _words(text)
    return bool(words) and (words[0] in RETURN_INDICATORS or words[-1] in RETURN_INDICATORS)


def short_non_command(kind, name: str) -> bool:
    """A few words not starting with a command verb read as a returned value."""
    words = _words(name or "")
    if len(words) > SHORT_MESSAGE_WORDS:
        return False
    return not words or (words[0] not in CALL_VERBS and words[0] not in SIDE_EFFECT_VERBS)


def always(kind, name: str) -> bool:
    return True


@dataclass(frozen=True)
class ClassificationRule:
    """A named predicate and the role it assigns when it fires."""

    name: str
    predicate: Callable[[Union[MessageKind, str], str], bool]
    role: MessageRole

    def applies(self, kind, name: str) -> bool:
        return self.predicate(kind, name)


@dataclass(frozen=True)
class Classification:
    """The decided role and the rule that decided it."""

    role: MessageRole
    rule: str

    @property
    def is_call(self) -> bool:
        return self.role == MessageRole.CALL


CALL, RETURN = MessageRole.CALL, MessageRole.RETURN

# Order is the contract: the first rule that fires decides.
DEFAULT_RULES: List[ClassificationRule] = [
    ClassificationRule("declared-return", declared_return, RETURN),
    ClassificationRule("declared-create", declared_create, CALL),
    ClassificationRule("unlabelled-synch-call", unlabelled_synch_call, CALL),
    ClassificationRule("return-keyword", return_keyword, RETURN),
    ClassificationRule("return-literal", return_literal, RETURN),
    ClassificationRule("side-effect-action", side_effect_action, RETURN),
    ClassificationRule("side-effect-mutation", side_effect_mutation, RETURN),
    ClassificationRule("call-verb", known_call_verb, CALL),
    ClassificationRule("call-expression", has_call_expression, CALL),
    ClassificationRule("call-verb-identifier", call_verb_identifier, CALL),
    ClassificationRule("return-indicator", return_indicator, RETURN),
    ClassificationRule("short-non-command", short_non_command, RETURN),
    ClassificationRule("default-call", always, CALL),
]


class MessageClassifier:
    """
    Decides whether a message is a forward call or a return.

    Only call-classified messages contribute edges to the call graph.
    """

    def __init__(self, rules: Optional[List[ClassificationRule]] = None):
        """
        Initialize the classifier.

        Args:
            rules: Ordered rules, DEFAULT_RULES when not given
        """
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def classify(self, kind: Union[MessageKind, str], name: str) -> Classification:
        """
        Classify a message.

        Args:
            kind: Declared message type
            name: Message display name

        Returns:
            Classification naming the rule that fired
        """
        for rule in self.rules:
            if rule.applies(kind, name):
                logger.debug(f"Message {name!r} classified {rule.role.value} by {rule.name}")
                return Classification(rule.role, rule.name)
        return Classification(CALL, "no-rule")

    def is_call(self, kind: Union[MessageKind, str], name: str) -> bool:
        return self.classify(kind, name).is_call

    def is_return(self, kind: Union[MessageKind, str], name: str) -> bool:
        return not self.is_call(kind, name)
