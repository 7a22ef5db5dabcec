"""Forklift inspection checklist vocabulary and payload field names."""

INSPECTION_ITEMS: dict[str, str] = {
    "forks": "Forks (cracks, bends, wear)",
    "mastLiftChains": "Mast and Lift Chains",
    "overheadGuard": "Overhead Guard",
    "loadBackrest": "Load Backrest",
    "tiresWheels": "Tires and Wheels",
    "brakes": "Brakes (service and parking)",
    "steering": "Steering",
    "horn": "Horn",
    "lights": "Lights (head, tail, warning)",
    "backupAlarm": "Backup Alarm",
    "hydraulicSystem": "Hydraulic System (leaks, operation)",
    "batteryFuel": "Battery/Fuel Level",
    "seatBelt": "Seat Belt",
    "mirrors": "Mirrors",
    "fireExtinguisher": "Fire Extinguisher",
}

# Payload fields read by the statistics and the workbook
ASSET_FIELD = "forkliftId"
SAFE_TO_OPERATE_FIELD = "safeToOperate"
DATE_FIELD = "date"
OPERATOR_FIELD = "operatorName"
SHIFT_FIELD = "shift"
HOUR_METER_FIELD = "hourMeter"
DEFECTS_FIELD = "defectsFound"

UNKNOWN = "Unknown"


def item_label(key: str) -> str:
    """Display label for a checklist key; unknown keys are shown as-is."""
    return INSPECTION_ITEMS.get(key, key)
