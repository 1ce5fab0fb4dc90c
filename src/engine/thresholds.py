"""Threshold scoring for composition match fractions.

Maps a match fraction to 0-100 on a piecewise-linear curve calibrated to
named quality bands (in % of the zone population):

  Excellent  >= 30   80-100
  Strong     25-30   70-79
  Good       20-25   60-69
  Average    15-20   50-59
  Weak       10-15   40-49
  Poor        5-10   20-39
  Very Poor   < 5     0-19

The same curve scores ethnicity, gender, age and income matches.
Pure functions. No I/O.
"""

from src.models.scoring import MatchBand

EXCELLENT = 30
STRONG = 25
GOOD = 20
AVERAGE = 15
WEAK = 10
POOR = 5


def score_percentage_match(fraction: float) -> float:
    """Score a 0-1 match fraction on the 0-100 threshold curve."""
    pct = fraction * 100

    if pct >= EXCELLENT:
        return min(100.0, 80 + (pct - EXCELLENT) / 20 * 20)
    if pct >= STRONG:
        return 70 + (pct - STRONG) / 5 * 9
    if pct >= GOOD:
        return 60 + (pct - GOOD) / 5 * 9
    if pct >= AVERAGE:
        return 50 + (pct - AVERAGE) / 5 * 9
    if pct >= WEAK:
        return 40 + (pct - WEAK) / 5 * 9
    if pct >= POOR:
        return 20 + (pct - POOR) / 5 * 19
    return max(0.0, pct / POOR * 19)


def match_band(fraction: float) -> MatchBand:
    pct = fraction * 100
    if pct >= EXCELLENT:
        return MatchBand.EXCELLENT
    if pct >= STRONG:
        return MatchBand.STRONG
    if pct >= GOOD:
        return MatchBand.GOOD
    if pct >= AVERAGE:
        return MatchBand.AVERAGE
    if pct >= WEAK:
        return MatchBand.WEAK
    if pct >= POOR:
        return MatchBand.POOR
    return MatchBand.VERY_POOR
