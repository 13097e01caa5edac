"""Recovery (detox / walk) session lifecycle."""
