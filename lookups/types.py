# lookups/types.py
from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class LookupCategoryData:
    id: str
    code: str
    name: str
    description: str = ''
    is_active: bool = True

    @classmethod
    def from_model(cls, category):
        return cls(
            id=str(category.pk),
            code=category.code,
            name=category.name,
            description=category.description,
            is_active=category.is_active,
        )

    @classmethod
    def from_row(cls, row: dict):
        return cls(
            id=str(row['id']),
            code=row['code'],
            name=row['name'],
            description=row.get('description') or '',
            is_active=row.get('is_active', True),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class LookupValueData:
    id: str
    category_id: str
    code: str
    name: str
    color_code: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0

    @classmethod
    def from_model(cls, value):
        return cls(
            id=str(value.pk),
            category_id=str(value.category_id),
            code=value.code,
            name=value.name,
            color_code=value.color_code or None,
            is_active=value.is_active,
            sort_order=value.sort_order,
        )

    @classmethod
    def from_row(cls, row: dict):
        return cls(
            id=str(row['id']),
            category_id=str(row['category_id']),
            code=row['code'],
            name=row['name'],
            color_code=row.get('color_code') or None,
            is_active=row.get('is_active', True),
            sort_order=row.get('sort_order') or 0,
        )

    def to_dict(self) -> dict:
        return asdict(self)
