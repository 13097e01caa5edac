"""Weekly XP accounting, stable snapshot cache, and per-week flags."""
