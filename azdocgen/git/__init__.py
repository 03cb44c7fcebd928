"""GitHub access: pattern matching, diffs, REST client and commit publishing."""
