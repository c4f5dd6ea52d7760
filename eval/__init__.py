"""Local arena, pairwise benchmark and TrueSkill tournament for weight profiles."""
