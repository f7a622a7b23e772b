from __future__ import annotations

from convite.pix import MerchantConfig, PixPayloadBuilder
from convite.settings import settings


def get_pix_builder() -> PixPayloadBuilder:
    return PixPayloadBuilder(MerchantConfig.from_settings(settings))
