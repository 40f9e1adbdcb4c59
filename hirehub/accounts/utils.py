from decimal import Decimal, ROUND_HALF_UP

# Order matters: it is the order the progress checklist is shown in.
PROFILE_COMPLETENESS_FIELDS = (
    "full_name",
    "phone",
    "location",
    "bio",
    "job_title",
    "company_name",
    "school_name",
    "degree",
)


def round_percent(part: int, total: int) -> int:
    """Return ``100 * part / total`` rounded half up to a whole percent (0 when total is 0)."""
    if not total:
        return 0
    value = Decimal(100 * part) / Decimal(total)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def profile_completeness(profile, skills=None) -> int:
    """Percentage of the tracked profile fields that are filled in.

    Tracks the eight text fields above, resume presence and "at least one
    skill". ``skills`` may be passed to avoid a query; otherwise the profile's
    saved skills are used.
    """
    if skills is None:
        skills = profile.skill_names() if getattr(profile, "pk", None) else []

    values = [getattr(profile, name, None) for name in PROFILE_COMPLETENESS_FIELDS]
    values.append(bool(getattr(profile, "resume", None)))
    values.append(len(skills) > 0)

    filled = sum(1 for value in values if value and str(value).strip())
    return round_percent(filled, len(values))
