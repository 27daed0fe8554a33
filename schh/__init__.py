"""schh: named, resumable screen sessions over ssh."""
