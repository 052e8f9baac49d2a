"""File parsing utilities that convert subject listings into records.

Supported input types: JSON and CSV. Parsers return a list of
dictionaries with keys `nome`, `descricao` and `professor`; missing
values are `None`.
"""

import csv
import io
import json
from typing import Dict, List, Optional

# English headers are accepted as aliases of the stored column names.
_ALIASES = {
    'nome': ('nome', 'name'),
    'descricao': ('descricao', 'description'),
    'professor': ('professor', 'instructor'),
}


def parse_subject_file(file_bytes: bytes, filename: str) -> List[Dict]:
    """Dispatch to the appropriate parser based on file extension."""
    name = filename.lower()
    if name.endswith('.json'):
        return parse_json(file_bytes)
    if name.endswith('.csv'):
        return parse_csv(file_bytes)
    raise ValueError('Unsupported file type')


def parse_json(b: bytes) -> List[Dict]:
    """Parse a JSON array of subject objects."""
    data = json.loads(b.decode('utf-8'))
    if not isinstance(data, list):
        raise ValueError('expected a JSON array of subjects')
    out = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError('subject item must be an object')
        out.append(normalize_subject(item))
    return out


def parse_csv(b: bytes) -> List[Dict]:
    """Parse a CSV with a header row (`nome,descricao,professor`)."""
    reader = csv.DictReader(io.StringIO(b.decode('utf-8-sig')))
    return [normalize_subject(row) for row in reader]


def normalize_subject(item: Dict) -> Dict:
    return {key: _first_value(item, aliases) for key, aliases in _ALIASES.items()}


def _first_value(item: Dict, keys) -> Optional[str]:
    for k in keys:
        v = item.get(k)
        if v is not None and str(v).strip():
            return str(v).strip()
    return None
