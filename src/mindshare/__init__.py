"""Mindshare: synthetic advisor meeting briefs, compliance scoring and similarity graphs."""
