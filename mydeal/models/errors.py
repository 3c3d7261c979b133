class MarketplaceError(Exception):
    """Базовая ошибка маркетплейса: операция отклонена, хранилище не изменено."""

    def __init__(self, message: str, request_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.request_id = request_id


class ValidationRejected(MarketplaceError):
    pass


class DuplicateBidError(MarketplaceError):
    pass


class RequirementClosedError(MarketplaceError):
    pass


class RequirementNotFoundError(MarketplaceError):
    pass


class BidNotFoundError(MarketplaceError):
    pass


class IdentityError(MarketplaceError):
    pass


class PendingAcceptanceError(MarketplaceError):
    pass
