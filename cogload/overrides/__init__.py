"""Manual override allowance for locked gating decisions."""
