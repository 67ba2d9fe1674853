"""Internal value types built from Moveware payloads.

Every field has a non-null default so consumers never branch on missing
data. ``to_dict`` produces the camelCase JSON the quote page consumes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class MwCredentials:
    co_id: str
    username: str
    password: str = field(repr=False)
    base_url: str


@dataclass(frozen=True)
class InternalAddress:
    line1: str = ""
    line2: str = ""
    city: str = ""
    state: str = ""
    postcode: str = ""
    country: str = ""

    def to_dict(self, prefix: str) -> Dict[str, str]:
        return {
            f"{prefix}Line1": self.line1,
            f"{prefix}Line2": self.line2,
            f"{prefix}City": self.city,
            f"{prefix}State": self.state,
            f"{prefix}Postcode": self.postcode,
            f"{prefix}Country": self.country,
        }


@dataclass(frozen=True)
class InternalBranding:
    company_name: str = "Moveware"
    logo_url: str = ""
    hero_banner_url: str = ""
    footer_image_url: str = ""
    primary_color: str = "#1E40AF"
    secondary_color: str = "#FFFFFF"
    font_family: str = "Inter"
    inventory_weight_unit: str = "kg"  # "kg" or "lbs"
    footer_bg_color: str = "#ffffff"
    footer_text_color: str = "#374151"
    footer_address_line1: str = ""
    footer_address_line2: str = ""
    footer_phone: str = ""
    footer_email: str = ""
    footer_abn: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "companyName": self.company_name,
            "logoUrl": self.logo_url,
            "heroBannerUrl": self.hero_banner_url,
            "footerImageUrl": self.footer_image_url,
            "primaryColor": self.primary_color,
            "secondaryColor": self.secondary_color,
            "fontFamily": self.font_family,
            "inventoryWeightUnit": self.inventory_weight_unit,
            "footerBgColor": self.footer_bg_color,
            "footerTextColor": self.footer_text_color,
            "footerAddressLine1": self.footer_address_line1,
            "footerAddressLine2": self.footer_address_line2,
            "footerPhone": self.footer_phone,
            "footerEmail": self.footer_email,
            "footerAbn": self.footer_abn,
        }


@dataclass(frozen=True)
class InternalJob:
    id: int = 0
    title_name: str = ""
    first_name: str = ""
    last_name: str = ""
    move_manager: str = ""
    move_type: str = ""
    estimated_delivery_details: str = ""
    job_value: float = 0
    brand_code: str = ""
    branch_code: str = ""
    uplift: InternalAddress = field(default_factory=InternalAddress)
    delivery: InternalAddress = field(default_factory=InternalAddress)
    measures_volume_gross_m3: float = 0
    measures_weight_gross_kg: float = 0
    branding: InternalBranding = field(default_factory=InternalBranding)

    @property
    def customer_name(self) -> str:
        return " ".join(p for p in (self.title_name, self.first_name, self.last_name) if p)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "titleName": self.title_name,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "moveManager": self.move_manager,
            "moveType": self.move_type,
            "estimatedDeliveryDetails": self.estimated_delivery_details,
            "jobValue": self.job_value,
            "brandCode": self.brand_code,
            "branchCode": self.branch_code,
        }
        data.update(self.uplift.to_dict("uplift"))
        data.update(self.delivery.to_dict("delivery"))
        data["measuresVolumeGrossM3"] = self.measures_volume_gross_m3
        data["measuresWeightGrossKg"] = self.measures_weight_gross_kg
        data["branding"] = self.branding.to_dict()
        return data


@dataclass(frozen=True)
class InternalCostingCharge:
    id: int = 0
    heading: str = ""
    notes: str = ""
    quantity: float = 1
    price: float = 0
    currency: str = "AUD"
    currency_symbol: str = "$"
    tax_code: str = ""
    sort: str = ""
    included: bool = False
    # oneTotal == "Y": the aggregate line for the whole option
    is_base_charge: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "heading": self.heading,
            "notes": self.notes,
            "quantity": self.quantity,
            "price": self.price,
            "currency": self.currency,
            "currencySymbol": self.currency_symbol,
            "taxCode": self.tax_code,
            "sort": self.sort,
            "included": self.included,
            "isBaseCharge": self.is_base_charge,
        }


@dataclass(frozen=True)
class InternalCosting:
    id: str = ""
    name: str = ""
    category: str = ""
    description: str = ""
    quantity: float = 1
    rate: float = 0
    net_total: str = "0.00"
    total_price: float = 0
    tax_included: bool = True
    currency: str = "AUD"
    currency_symbol: str = "$"
    charges: List[InternalCostingCharge] = field(default_factory=list)
    inclusions: List[str] = field(default_factory=list)
    exclusions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "quantity": self.quantity,
            "rate": self.rate,
            "netTotal": self.net_total,
            "totalPrice": self.total_price,
            "taxIncluded": self.tax_included,
            "currency": self.currency,
            "currencySymbol": self.currency_symbol,
            "charges": [c.to_dict() for c in self.charges],
            "rawData": {
                "inclusions": list(self.inclusions),
                "exclusions": list(self.exclusions),
            },
        }


@dataclass(frozen=True)
class InternalInventoryItem:
    id: int = 0
    description: str = ""
    room: str = ""
    quantity: float = 1
    cube: float = 0  # m3, line total
    type_code: str = ""
    weight_kg: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "room": self.room,
            "quantity": self.quantity,
            "cube": self.cube,
            "typeCode": self.type_code,
            "weightKg": self.weight_kg,
        }


@dataclass(frozen=True)
class InternalMeasurements:
    volume_gross_m3: float = 0
    weight_gross_kg: float = 0
    weight_gross_pounds: float = 0

    def to_dict(self) -> Dict[str, float]:
        return {
            "volumeGrossM3": self.volume_gross_m3,
            "weightGrossKg": self.weight_gross_kg,
            "weightGrossPounds": self.weight_gross_pounds,
        }
