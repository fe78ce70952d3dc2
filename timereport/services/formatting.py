# timereport/services/formatting.py
MS_PER_HOUR = 1000 * 60 * 60

def ms_to_hours(ms: float) -> float:
    return ms / MS_PER_HOUR

def format_duration(ms: float) -> str:
    """
    Renders milliseconds as HH:MM:SS. Hours keep counting past 24,
    negative values display as zero.
    """
    if ms < 0:
        ms = 0
    total_seconds = int(ms // 1000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

def format_hours(hours: float) -> str:
    return f"{hours:.1f}h"
