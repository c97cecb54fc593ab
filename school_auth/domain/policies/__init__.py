"""Domain policies: security thresholds and credential rules."""
