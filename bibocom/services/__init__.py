from bibocom.services.media_service import MediaService
from bibocom.services.promo_service import PromoRegistry

__all__ = [
    "MediaService",
    "PromoRegistry",
]
