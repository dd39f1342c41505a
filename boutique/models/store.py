"""
Store configuration models: editable site settings and catalogue categories.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .product import EPOCH


@dataclass
class StoreSettings:
    """Editable copy shown across the storefront (single row, id 1)."""
    announcement_text: str = ""
    hero_eyebrow: str = ""
    hero_title: str = ""
    hero_description: str = ""
    contact_intro: str = ""
    contact_phone: str = ""
    contact_email: str = ""
    contact_hours: str = ""
    footer_blurb: str = ""
    order_chat_number: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class StoreCategory:
    """Main category with its subcategories."""
    id: str
    slug: str
    name: str
    description: str = ""
    image_url: Optional[str] = None
    subcategories: List[str] = field(default_factory=list)
    is_active: bool = True
    display_order: int = 0
    created_at: datetime = EPOCH
    updated_at: datetime = EPOCH
