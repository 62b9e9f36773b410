"""
Deal note codec

Older deals carry product, effective date, source and referral count inside
the free-text note, e.g.

    Product: Final Expense | Effective: 2024-03-01 | Source: Inbound | Referrals: 2 | Notes: call after 5

New deals store these in typed columns. `parse_note` reads the legacy format
so selectors can fill the typed fields for old rows; `build_note` renders the
same format for consumers that still read the note.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime

_SEGMENT_SPLIT = re.compile(r'\s*(?:\||\n)\s*')
_KEY_VALUE = re.compile(r'^(?P<key>[A-Za-z #]+?)\s*[:=]\s*(?P<value>.*)$')

_KEY_ALIASES = {
    'product': 'product_name',
    'product name': 'product_name',
    'plan': 'product_name',
    'effective': 'effective_date',
    'effective date': 'effective_date',
    'eff': 'effective_date',
    'eff date': 'effective_date',
    'source': 'source',
    'lead source': 'source',
    'referrals': 'referrals',
    'referral': 'referrals',
    'refs': 'referrals',
    '# referrals': 'referrals',
    'notes': 'text',
    'note': 'text',
}

_DATE_FORMATS = ('%Y-%m-%d', '%m/%d/%Y', '%m/%d/%y', '%m-%d-%Y')


@dataclass
class NoteFields:
    product_name: str | None = None
    effective_date: date | None = None
    source: str | None = None
    referrals: int | None = None
    text: str | None = None


def parse_date_loose(value: str | None) -> date | None:
    if not value:
        return None
    value = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def _parse_int(value: str) -> int | None:
    match = re.search(r'\d+', value or '')
    return int(match.group()) if match else None


def parse_note(note: str | None) -> NoteFields:
    """Split a legacy delimited note into its structured parts."""
    fields = NoteFields()
    if not note or not note.strip():
        return fields

    leftovers: list[str] = []
    for segment in _SEGMENT_SPLIT.split(note.strip()):
        if not segment:
            continue
        match = _KEY_VALUE.match(segment)
        target = _KEY_ALIASES.get(match.group('key').strip().lower()) if match else None
        if not target:
            leftovers.append(segment)
            continue

        value = match.group('value').strip()
        if target == 'effective_date':
            fields.effective_date = parse_date_loose(value)
        elif target == 'referrals':
            fields.referrals = _parse_int(value)
        elif target == 'text':
            if value:
                leftovers.append(value)
        else:
            setattr(fields, target, value or None)

    fields.text = ' | '.join(leftovers) or None
    return fields


def build_note(fields: NoteFields) -> str | None:
    """Render structured fields back into the delimited note format."""
    parts = []
    if fields.product_name:
        parts.append(f'Product: {fields.product_name}')
    if fields.effective_date:
        parts.append(f'Effective: {fields.effective_date.isoformat()}')
    if fields.source:
        parts.append(f'Source: {fields.source}')
    if fields.referrals is not None:
        parts.append(f'Referrals: {fields.referrals}')
    if fields.text:
        parts.append(f'Notes: {fields.text}' if parts else fields.text)
    return ' | '.join(parts) or None


def resolve_structured_fields(row: dict) -> dict:
    """
    Fill missing typed fields on a deal row from its note.

    Typed columns win over anything parsed out of the note.
    """
    parsed = parse_note(row.get('note'))
    for field in ('product_name', 'effective_date', 'source', 'referrals'):
        if row.get(field) in (None, ''):
            row[field] = getattr(parsed, field)
    return row
