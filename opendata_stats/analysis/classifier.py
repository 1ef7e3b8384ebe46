# ==============================================
# FieldClassifier
# ==============================================
#
# PURPOSE:
#   Map a layer field's esri type tag to the statistic category
#   that decides which queries run for it.
#
# CLASS: FieldClassifier
# ----------------------
#   Stateless — raw type in, category out.
#
#   Methods:
#   --------
#   - classify(raw_type: str) -> FieldCategory
#       Total: any tag not in the table is UNSUPPORTED.
#
#   - classify_all(fields: list[FieldDescriptor]) -> list[ClassifiedField]
#       Classify every field, keeping schema order.
#
#   Mapping:
#   --------
#     esriFieldTypeInteger       → NUMERIC
#     esriFieldTypeSmallInteger  → NUMERIC
#     esriFieldTypeDouble        → NUMERIC
#     esriFieldTypeSingle        → NUMERIC
#     esriFieldTypeDate          → TEMPORAL
#     esriFieldTypeOID           → ROW_IDENTIFIER
#     esriFieldTypeString        → CATEGORICAL
#     anything else              → UNSUPPORTED
#
# ==============================================

from typing import Dict, Iterable, List

from .field_category import ClassifiedField, FieldCategory, FieldDescriptor


class FieldClassifier:
    """
    Assigns a FieldCategory to each schema field from its type tag.

    Only one field per layer carries esriFieldTypeOID; that field becomes
    the row identifier.
    """

    TYPE_CATEGORIES: Dict[str, FieldCategory] = {
        "esriFieldTypeInteger": FieldCategory.NUMERIC,
        "esriFieldTypeSmallInteger": FieldCategory.NUMERIC,
        "esriFieldTypeDouble": FieldCategory.NUMERIC,
        "esriFieldTypeSingle": FieldCategory.NUMERIC,
        "esriFieldTypeDate": FieldCategory.TEMPORAL,
        "esriFieldTypeOID": FieldCategory.ROW_IDENTIFIER,
        "esriFieldTypeString": FieldCategory.CATEGORICAL,
    }

    @classmethod
    def classify(cls, raw_type: str) -> FieldCategory:
        """
        Args:
            raw_type: esri field type tag

        Returns:
            The matching category, UNSUPPORTED if the tag is unknown
        """
        return cls.TYPE_CATEGORIES.get(raw_type, FieldCategory.UNSUPPORTED)

    @classmethod
    def classify_all(cls, fields: Iterable[FieldDescriptor]) -> List[ClassifiedField]:
        return [ClassifiedField(descriptor=f, category=cls.classify(f.raw_type)) for f in fields]
