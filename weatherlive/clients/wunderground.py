from __future__ import annotations

import logging
from urllib.parse import quote
from xml.etree import ElementTree as ET

from weatherlive.models.weather import CurrentObservation

logger = logging.getLogger(__name__)

# /response/current_observation
ROOT_TAG = "response"
OBSERVATION_TAG = "current_observation"

# provider leaf -> CurrentObservation attribute
FIELD_MAP: dict[str, str] = {
    "weather": "description",
    "temp_c": "temperature_c",
    "feelslike_c": "feels_like_c",
    "relative_humidity": "humidity",
    "wind_dir": "wind_direction",
    "wind_kph": "wind_speed_kph",
    "icon_url": "icon_url",
}


def build_query_url(base_url: str, city: str, suffix: str = ".xml") -> str:
    return f"{base_url}{quote(city, safe='')}{suffix}"


def parse_current_observation(xml_text: bytes | str) -> CurrentObservation:
    """Extract the current observation fields from a Weather Underground reply.

    Pass the raw body as bytes so the document's declared encoding is honoured.

    Values are kept exactly as the provider formats them. A missing leaf, a
    missing ``current_observation`` node or a document that does not parse all
    yield empty strings rather than an error.
    """
    node = _find_observation(xml_text)
    if node is None:
        return CurrentObservation()

    values = {attr: _leaf_text(node, leaf) for leaf, attr in FIELD_MAP.items()}
    return CurrentObservation(**values)


def _find_observation(xml_text: bytes | str) -> ET.Element | None:
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        logger.warning("Weather response is not well-formed XML: %s", e)
        return None
    if root.tag != ROOT_TAG:
        logger.warning("Unexpected weather response root <%s>", root.tag)
        return None
    node = root.find(OBSERVATION_TAG)
    if node is None:
        logger.warning("Weather response has no <%s> node", OBSERVATION_TAG)
    return node


def _leaf_text(node: ET.Element, leaf: str) -> str:
    child = node.find(leaf)
    if child is None or len(child):
        return ""
    return child.text or ""
