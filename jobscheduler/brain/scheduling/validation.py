"""
Validation for data entering the scheduling core (job forms, settings
panel, drag-and-drop targets). The allocator itself trusts its inputs.
"""
from typing import Any, Dict, List, Optional, Tuple

from jobscheduler.brain.scheduling.config import SchedulingConfig
from jobscheduler.brain.scheduling.models import CapacityOverride, ScheduleSettings
from jobscheduler.datetime_utils import format_iso_date, is_weekday, next_weekday, parse_iso_date


class SchedulingValidator:
    """Validation rules for the job and settings ingestion surface."""
    
    @staticmethod
    def validate_hours(value: Any, field_name: str, allow_zero: bool = True) -> Tuple[bool, Optional[float], Optional[str]]:
        """
        Validate an hour value.
        
        Args:
            value: Raw input
            field_name: Name used in the error message
            allow_zero: Whether 0 is accepted (capacities) or not (required hours)
            
        Returns:
            (is_valid, normalized_hours, error_message)
        """
        if isinstance(value, bool):
            return False, None, f"{field_name} must be a number"
        try:
            hours = float(value)
        except (ValueError, TypeError):
            return False, None, f"{field_name} must be a number"
        
        if hours != hours or hours in (float('inf'), float('-inf')):
            return False, None, f"{field_name} must be a finite number"
        if allow_zero and hours < 0:
            return False, None, f"{field_name} cannot be negative"
        if not allow_zero and hours <= SchedulingConfig.HOURS_TOLERANCE:
            return False, None, f"{field_name} must be positive"
        return True, hours, None
    
    @staticmethod
    def validate_date(value: Any, field_name: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate a YYYY-MM-DD date string.
        
        Returns:
            (is_valid, normalized_date, error_message)
        """
        if value is None or value == '':
            return True, None, None
        parsed = parse_iso_date(value)
        if parsed is None:
            return False, None, f"{field_name} must be in YYYY-MM-DD format"
        return True, format_iso_date(parsed), None
    
    @staticmethod
    def snap_to_weekday(date_str: str) -> Tuple[str, Optional[str]]:
        """
        Move a weekend date forward to Monday.
        
        Returns:
            (weekday_date, notice) where notice is None if nothing moved
        """
        parsed = parse_iso_date(date_str)
        snapped = next_weekday(parsed)
        if snapped == parsed:
            return date_str, None
        snapped_str = format_iso_date(snapped)
        return snapped_str, f"{date_str} falls on a weekend; moved to Monday {snapped_str}"
    
    @staticmethod
    def validate_activity(activity_type: Any, activity_other: Any) -> Tuple[bool, Optional[str], Optional[str], Optional[str]]:
        """
        Validate the activity tag and its free-text detail.
        
        Returns:
            (is_valid, activity_type, activity_other, error_message)
        """
        if activity_type is None or activity_type == '':
            activity_type = SchedulingConfig.DEFAULT_ACTIVITY_TYPE
        if activity_type not in SchedulingConfig.ACTIVITY_TYPES:
            return False, None, None, f"activityType must be one of: {', '.join(SchedulingConfig.ACTIVITY_TYPES)}"
        
        if activity_type != SchedulingConfig.OTHER_ACTIVITY_TYPE:
            return True, activity_type, None, None
        
        detail = str(activity_other).strip() if activity_other is not None else ''
        return True, activity_type, detail or None, None
    
    @staticmethod
    def validate_job(data: Dict[str, Any]) -> Tuple[bool, Dict[str, Any], Optional[str], List[str]]:
        """
        Validate a job form payload (camelCase keys).
        
        Args:
            data: Raw job payload
            
        Returns:
            (is_valid, fields, error_message, notices) where fields holds
            Job constructor keyword arguments (without id/color unless
            given) and notices lists informational messages such as a
            weekend date being moved to Monday.
        """
        notices: List[str] = []
        if not isinstance(data, dict):
            return False, {}, "Request body must be a JSON object", notices
        
        name = str(data.get('name') or '').strip()
        if not name:
            return False, {}, "Job name is required", notices
        
        ok, required_hours, error = SchedulingValidator.validate_hours(
            data.get('requiredHours'), 'requiredHours', allow_zero=False
        )
        if not ok:
            return False, {}, error, notices
        
        ok, activity_type, activity_other, error = SchedulingValidator.validate_activity(
            data.get('activityType'), data.get('activityOther')
        )
        if not ok:
            return False, {}, error, notices
        
        ok, preferred, error = SchedulingValidator.validate_date(
            data.get('preferredStartDate'), 'preferredStartDate'
        )
        if not ok:
            return False, {}, error, notices
        if preferred:
            preferred, notice = SchedulingValidator.snap_to_weekday(preferred)
            if notice:
                notices.append(notice)
        
        quote_number = data.get('quoteNumber')
        quote_number = str(quote_number).strip() if quote_number is not None else None
        
        fields = {
            'name': name,
            'required_hours': required_hours,
            'is_urgent': bool(data.get('isUrgent', False)),
            'activity_type': activity_type,
            'activity_other': activity_other,
            'quote_number': quote_number or None,
            'preferred_start_date': preferred,
        }
        if data.get('color'):
            fields['color'] = str(data['color'])
        return True, fields, None, notices
    
    @staticmethod
    def validate_overrides(raw_overrides: Any) -> Tuple[bool, List[CapacityOverride], Optional[str]]:
        """
        Validate capacity overrides: weekday dates, non-negative hours, unique dates.
        
        Returns:
            (is_valid, overrides, error_message)
        """
        if raw_overrides is None:
            return True, [], None
        if not isinstance(raw_overrides, list):
            return False, [], "capacityOverrides must be a list"
        
        overrides: List[CapacityOverride] = []
        seen = set()
        for raw in raw_overrides:
            if not isinstance(raw, dict):
                return False, [], "Each capacity override must be an object with date and hours"
            ok, date_str, error = SchedulingValidator.validate_date(raw.get('date'), 'Override date')
            if not ok:
                return False, [], error
            if not date_str:
                return False, [], "Override date is required"
            if not is_weekday(parse_iso_date(date_str)):
                return False, [], f"Override date {date_str} falls on a weekend"
            if date_str in seen:
                return False, [], f"Duplicate capacity override for {date_str}"
            ok, hours, error = SchedulingValidator.validate_hours(raw.get('hours'), f"Override hours for {date_str}")
            if not ok:
                return False, [], error
            seen.add(date_str)
            overrides.append(CapacityOverride(date=date_str, hours=hours))
        
        overrides.sort(key=lambda o: o.date)
        return True, overrides, None
    
    @staticmethod
    def validate_settings(data: Dict[str, Any]) -> Tuple[bool, Optional[ScheduleSettings], Optional[str]]:
        """
        Validate a settings payload.
        
        Accepts either {"dailyCapacityByDay": {monday..friday}} or the
        legacy {"dailyCapacityHours": N}, plus optional capacityOverrides.
        
        Returns:
            (is_valid, settings, error_message)
        """
        if not isinstance(data, dict):
            return False, None, "Request body must be a JSON object"
        
        ok, overrides, error = SchedulingValidator.validate_overrides(data.get('capacityOverrides'))
        if not ok:
            return False, None, error
        
        by_day = data.get('dailyCapacityByDay')
        if by_day is None:
            if 'dailyCapacityHours' not in data:
                return False, None, "dailyCapacityByDay is required"
            ok, hours, error = SchedulingValidator.validate_hours(data.get('dailyCapacityHours'), 'dailyCapacityHours')
            if not ok:
                return False, None, error
            return True, ScheduleSettings.uniform(hours, overrides), None
        
        if not isinstance(by_day, dict):
            return False, None, "dailyCapacityByDay must be an object"
        
        capacities = {}
        for key in SchedulingConfig.WEEKDAY_KEYS:
            if key not in by_day:
                return False, None, f"dailyCapacityByDay.{key} is required"
            ok, hours, error = SchedulingValidator.validate_hours(by_day[key], f"dailyCapacityByDay.{key}")
            if not ok:
                return False, None, error
            capacities[key] = hours
        
        return True, ScheduleSettings(daily_capacity_by_day=capacities, capacity_overrides=overrides), None
