"""Map catalog documents to domain catalog items and back."""

from __future__ import annotations

from qeasy.domain.types import CatalogItem

from .schema import CatalogItemDocument


def to_catalog_item(document: CatalogItemDocument) -> CatalogItem:
    return CatalogItem(
        identifier=document.asin,
        display_name=document.name,
        local_price=document.amazon_price or 0,
        source_title=document.amazon_title,
        image_url=document.main_image,
        is_expedited=bool(document.is_prime),
        ship_days=document.ship_days,
        listing_code=document.qoo10_id,
        listing_price=document.qoo10_price,
        updated_at=document.updated_at,
        extra=dict(document.model_extra or {}),
    )


def to_document(item: CatalogItem) -> CatalogItemDocument:
    payload: dict[str, object] = dict(item.extra)
    payload.update(
        {
            "asin": item.identifier,
            "name": item.display_name,
            "amazonPrice": item.local_price,
            "amazonTitle": item.source_title,
            "mainImage": item.image_url,
            "isPrime": item.is_expedited,
            "shipDays": item.ship_days,
            "qoo10Id": item.listing_code,
            "qoo10Price": item.listing_price,
            "updatedAt": item.updated_at,
        }
    )
    return CatalogItemDocument.model_validate(payload)
