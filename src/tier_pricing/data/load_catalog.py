"""
Catalog Loader - Reads the Services sheet (CSV export or workbook) into priced services.

Each row of the Services tab is one service; its tiers are stored as a
JSON list in the Pricing_Data column. Row order is kept because the
resolver's tie-break (first listed tier wins) depends on it.

Produces a load report in the same shape as the catalog build report:
input file hashes, metrics, warnings, errors.
"""
import json
import hashlib
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.models import PricingTier, ServiceRecord

REQUIRED_COLUMNS = ('Profile_ID', 'Service_Name', 'Pricing_Data')
SERVICES_SHEET = 'Services'


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]


def parse_pricing_data(raw: str, context: str) -> tuple[list[PricingTier], list[str]]:
    """
    Parse one Pricing_Data cell.

    Returns (tiers, warnings). Invalid tiers are skipped with a warning;
    a cell that is not a JSON list yields no tiers.
    """
    warnings = []
    raw = (raw or '').strip()
    if not raw:
        return [], warnings

    try:
        records = json.loads(raw)
    except json.JSONDecodeError as e:
        warnings.append(f"{context}: Pricing_Data is not valid JSON ({e.msg})")
        return [], warnings

    if not isinstance(records, list):
        warnings.append(f"{context}: Pricing_Data must be a JSON list")
        return [], warnings

    tiers = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            warnings.append(f"{context}: tier {index} is not an object, skipped")
            continue
        try:
            tiers.append(PricingTier.from_record(record))
        except ValueError as e:
            warnings.append(f"{context}: tier {index} skipped ({e})")

    return tiers, warnings


def read_services_sheet(path: Path) -> pd.DataFrame:
    """Read the Services tab from a CSV export or an .xlsx workbook."""
    if path.suffix.lower() in ('.xlsx', '.xlsm'):
        return pd.read_excel(path, sheet_name=SERVICES_SHEET, dtype=str).fillna('')
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def load_services(
    settings: Optional[Settings] = None,
    csv_path: Optional[Path] = None,
    verbose: bool = True
) -> tuple[list[ServiceRecord], dict]:
    """
    Load priced services from the Services sheet export.

    Args:
        settings: Optional settings override
        csv_path: Optional explicit CSV path (defaults to settings.services_csv)
        verbose: Print progress messages

    Returns:
        (services, load report dictionary)
    """
    settings = settings or get_settings()
    services_csv = csv_path or settings.services_csv

    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "input_files": {},
        "metrics": {},
        "warnings": [],
        "errors": []
    }

    if not services_csv.exists():
        msg = f"CRITICAL ERROR: {services_csv} not found."
        report["errors"].append(msg)
        report["status"] = "failed"
        if verbose:
            print(msg)
        return [], report

    report["input_files"]["services"] = {
        "path": str(services_csv),
        "hash": get_file_hash(services_csv)
    }

    try:
        df = read_services_sheet(services_csv)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, ValueError) as e:
        msg = f"ERROR: Failed to read {services_csv}. {e}"
        report["errors"].append(msg)
        report["status"] = "failed"
        if verbose:
            print(msg)
        return [], report

    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        msg = f"ERROR: {services_csv} is missing columns: {', '.join(missing)}"
        report["errors"].append(msg)
        report["status"] = "failed"
        if verbose:
            print(msg)
        return [], report

    services = []
    per_profile: dict[str, int] = {}
    tier_count = 0

    for row_num, row in enumerate(df.to_dict(orient='records'), start=2):
        profile_id = str(row.get('Profile_ID', '')).strip()
        name = str(row.get('Service_Name', '')).strip()
        if not profile_id or not name:
            report["warnings"].append(f"Row {row_num}: missing Profile_ID or Service_Name, skipped")
            continue

        index = per_profile.get(profile_id, 0)
        per_profile[profile_id] = index + 1

        tiers, warnings = parse_pricing_data(row.get('Pricing_Data', ''), f"Row {row_num} ({name})")
        report["warnings"].extend(warnings)
        tier_count += len(tiers)

        services.append(ServiceRecord(
            service_id=f"{profile_id}:{index}",
            profile_id=profile_id,
            name=name,
            service_type=str(row.get('Service_Type', '')).strip(),
            frequency=str(row.get('Frequency', '')).strip(),
            billing_frequency=str(row.get('Billing_Frequency', '')).strip(),
            tiers=tiers,
        ))

    report["metrics"] = {
        "rows": len(df),
        "services": len(services),
        "profiles": len(per_profile),
        "tiers": tier_count,
        "services_without_tiers": sum(1 for s in services if not s.tiers),
    }
    report["status"] = "success"

    if verbose:
        print(f"Loaded {len(services)} services ({tier_count} tiers) from {services_csv}")
        for warning in report["warnings"]:
            print(f"WARNING: {warning}")

    return services, report


def write_report(report: dict, report_path: Path, verbose: bool = True) -> Path:
    """Save a load report as JSON."""
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, 'w', encoding='utf-8') as f:
        json.dump(report, f, indent=2)
    if verbose:
        print(f"Load report saved to: {report_path}")
    return report_path


_FORM_TIER_KEY = re.compile(
    r"^services\[(\d+)\]\[pricingTiers\]\[(\d+)\]\[(\w+)\](?:\[(\d+)\]\[(\w+)\])?$"
)


def parse_form_tiers(form: dict) -> dict[int, list[PricingTier]]:
    """
    Read tiers from flattened profile-form fields.

    Keys look like ``services[0][pricingTiers][1][sqftMin]``; additive
    components nest one level deeper, as in
    ``services[0][pricingTiers][1][components][0][name]``. Tiers with no
    first price, no recurring price and no components are dropped (legacy
    "Component:" rows are kept so they can render as Included), as are
    tiers with inverted or infinite bounds. Returns
    {service_index: [PricingTier]} with tiers and components in index
    order; services left with no tiers are omitted.
    """
    raw: dict[int, dict[int, dict]] = {}
    for key, value in form.items():
        match = _FORM_TIER_KEY.match(str(key))
        if not match:
            continue
        service_index, tier_index = int(match.group(1)), int(match.group(2))
        record = raw.setdefault(service_index, {}).setdefault(tier_index, {})
        if match.group(4) is None:
            record[match.group(3)] = value
        elif match.group(3) == 'components':
            nested = record.setdefault('_components', {})
            nested.setdefault(int(match.group(4)), {})[match.group(5)] = value

    result = {}
    for service_index in sorted(raw):
        tiers = []
        for tier_index in sorted(raw[service_index]):
            record = raw[service_index][tier_index]
            if 'sqftMin' not in record or 'sqftMax' not in record:
                continue
            nested = record.pop('_components', {})
            if nested:
                record['components'] = [nested[k] for k in sorted(nested)]
            try:
                tier = PricingTier.from_record(record)
            except ValueError:
                continue
            if tier.first_price or tier.recurring_price or tier.components or tier.is_legacy_component:
                tiers.append(tier)
        if tiers:
            result[service_index] = tiers

    return result


if __name__ == "__main__":
    settings = get_settings()
    _, load_report = load_services(settings)
    write_report(load_report, settings.load_report)
