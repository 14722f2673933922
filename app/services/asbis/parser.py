"""Parsing of the Asbis ProductList.xml feed."""

import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

from app.core.exceptions import VendorUnavailable
from app.schemas.asbis import VendorProduct

logger = logging.getLogger(__name__)


def parse_product_list(xml_text: str) -> List[VendorProduct]:
    """
    Parse the ProductList.xml payload into vendor product snapshots.

    Raises:
        VendorUnavailable: when the payload is not well-formed XML
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        logger.error("Failed to parse Asbis product list: %s", exc)
        raise VendorUnavailable(f"Unparsable product list: {exc}") from exc

    products: List[VendorProduct] = []
    for index, element in enumerate(root.iter("Product")):
        product = _product_from_element(element)
        products.append(product)
        if index < 3:
            logger.debug(
                "Sample product #%s: code=%s, vendor=%s, category=%s, type=%s",
                index + 1,
                product.product_code,
                product.vendor,
                product.product_category,
                product.product_type,
            )

    logger.info("Parsed %s products from Asbis product list", len(products))
    return products


def _product_from_element(element: ET.Element) -> VendorProduct:
    return VendorProduct(
        product_code=_child_text(element, "ProductCode"),
        vendor=_child_text(element, "Vendor"),
        product_type=_child_text(element, "ProductType"),
        product_category=_child_text(element, "ProductCategory"),
        description=_child_text(element, "ProductDescription"),
        image=_child_text(element, "Image"),
        product_card=_child_text(element, "ProductCard"),
        images=_images(element.find("Images")),
        attributes=_attributes(element.find("AttrList")),
    )


def _child_text(element: ET.Element, tag: str) -> Optional[str]:
    child = element.find(tag)
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None


def _attributes(attr_list: Optional[ET.Element]) -> Dict[str, str]:
    attributes: Dict[str, str] = {}
    if attr_list is None:
        return attributes
    for item in attr_list.iter("element"):
        name = (item.get("Name") or "").strip()
        value = (item.get("Value") or "").strip()
        if name and value:
            attributes[name] = value
    return attributes


def _images(images: Optional[ET.Element]) -> List[str]:
    if images is None:
        return []
    return [
        image.text.strip()
        for image in images.iter("Image")
        if image.text and image.text.strip()
    ]
