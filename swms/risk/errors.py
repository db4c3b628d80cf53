# swms/risk/errors.py


class SwmsEngineError(Exception):
    pass


class CatalogIntegrityError(SwmsEngineError):
    """Bad catalog data. Raised at load time only; never caught by the engine."""

    def __init__(self, problems):
        self.problems = list(problems) if not isinstance(problems, str) else [problems]
        super().__init__("; ".join(self.problems))


class AIGenerationError(SwmsEngineError):
    pass


class AITimeoutError(AIGenerationError):
    pass


class AIMalformedResponseError(AIGenerationError):
    pass


# Warning codes surfaced on Resolution.warnings / GeneratedDocument.warnings
RESOLUTION_EMPTY = "ResolutionEmpty"
UNKNOWN_TRADE = "UnknownTrade"
AI_TIMEOUT = "AITimeout"
AI_MALFORMED = "AIMalformedResponse"
AI_UNAVAILABLE = "AIUnavailable"


def warning_text(code: str, message: str) -> str:
    return f"{code}: {message}"
