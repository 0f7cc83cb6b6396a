"""Error types surfaced at the engine's call-site boundaries."""


class AdaptSrsError(Exception):
    """Base class for all adaptsrs errors."""


class CardNotFoundError(AdaptSrsError):
    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card not found: {card_id}")


class DeckNotFoundError(AdaptSrsError):
    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(f"Deck not found: {deck_id}")


class ImportFormatError(AdaptSrsError):
    """Raised when an import file yields no usable rows."""


class SessionNotFoundError(AdaptSrsError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Study session not found: {session_id}")
