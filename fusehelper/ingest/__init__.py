"""Offline conversion of the fusion FAQ into the item dataset."""

from .categories import category_for_title, category_for_name, category_for_section
from .faq_parser import build_dataset, extract_text, parse_guide, write_dataset

__all__ = [
    "build_dataset",
    "category_for_name",
    "category_for_section",
    "category_for_title",
    "extract_text",
    "parse_guide",
    "write_dataset",
]
