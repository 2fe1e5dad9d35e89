"""
Trust Engine for composite domain trust scoring.

This module folds a TrustSignalSet into a bounded integer score and a
qualitative band. Scoring is a pure function of the signals and the
configured weights: the same input always yields the same score, and
absent signals (unknown age, unknown registrar) contribute nothing rather
than counting against the domain.

Three regimes apply, checked in order:
1. Government match: fixed score, all other signals ignored
2. .edu: narrow band around a high base
3. Everything else: base plus additive adjustments
"""

import math
from typing import Optional

from .config import ScoringWeights
from .enums import TLDClass, TrustBand
from .models import ScoreAdjustment, TrustHighlights, TrustScore, TrustSignalSet


# Inclusive lower bounds, highest first
BAND_THRESHOLDS: tuple[tuple[int, TrustBand], ...] = (
    (80, TrustBand.VERY_HIGH),
    (60, TrustBand.HIGH),
    (40, TrustBand.MEDIUM),
    (20, TrustBand.LOW),
)

SCORE_MIN = 0
SCORE_MAX = 100


class TrustEngine:
    """
    Stateless trust score aggregator.

    Every adjustment is recorded as a ScoreAdjustment so callers can show
    how the final number was reached.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None) -> None:
        """
        Initialize the trust engine.

        Args:
            weights: Scoring coefficients; defaults to ScoringWeights()
        """
        self._weights = weights or ScoringWeights()

    @property
    def weights(self) -> ScoringWeights:
        return self._weights

    def score(self, signals: TrustSignalSet) -> TrustScore:
        """Compute the trust score for a signal set."""
        trust_score, _ = self.evaluate(signals)
        return trust_score

    def evaluate(
        self, signals: TrustSignalSet
    ) -> tuple[TrustScore, list[ScoreAdjustment]]:
        """
        Compute the trust score together with its breakdown.

        Args:
            signals: Evidence collected for one domain

        Returns:
            Tuple of (TrustScore, ordered list of adjustments applied)
        """
        if signals.is_government:
            value = self._weights.government_score
            adjustments = [ScoreAdjustment(
                signal="government",
                points=float(value),
                reason=f"Official government domain ({signals.government_country})",
            )]
            value = _round_half_up(_clamp(value, SCORE_MIN, SCORE_MAX))
            return TrustScore(value=value, band=self.band_for(value)), adjustments

        if signals.is_edu:
            raw, adjustments = self._edu_adjustments(signals)
            raw = _clamp(raw, self._weights.edu_min, self._weights.edu_max)
        else:
            raw, adjustments = self._regular_adjustments(signals)

        value = _round_half_up(_clamp(raw, SCORE_MIN, SCORE_MAX))
        return TrustScore(value=value, band=self.band_for(value)), adjustments

    def band_for(self, value: float) -> TrustBand:
        """Map a score to its band. Thresholds are inclusive lower bounds."""
        for threshold, band in BAND_THRESHOLDS:
            if value >= threshold:
                return band
        return TrustBand.VERY_LOW

    def _edu_adjustments(
        self, signals: TrustSignalSet
    ) -> tuple[float, list[ScoreAdjustment]]:
        w = self._weights
        adjustments = [ScoreAdjustment("edu_base", float(w.edu_base), "Accredited .edu domain")]

        if signals.has_ssl:
            adjustments.append(ScoreAdjustment("https", w.edu_https_bonus, "Served over HTTPS"))

        if signals.scam_keywords:
            penalty = w.edu_keyword_penalty * len(signals.scam_keywords)
            adjustments.append(ScoreAdjustment(
                "scam_keywords",
                -penalty,
                f"{len(signals.scam_keywords)} scam keyword(s) in hostname",
            ))

        age_points = self._age_points(signals.domain_age_years, w.edu_age_max_bonus)
        if age_points:
            adjustments.append(ScoreAdjustment(
                "domain_age", age_points, f"Registered {signals.domain_age_years:.1f} years ago"
            ))

        if signals.trusted_registrar:
            adjustments.append(ScoreAdjustment(
                "registrar", w.trusted_registrar_bonus, f"Trusted registrar ({signals.registrar})"
            ))

        return sum(a.points for a in adjustments), adjustments

    def _regular_adjustments(
        self, signals: TrustSignalSet
    ) -> tuple[float, list[ScoreAdjustment]]:
        w = self._weights
        adjustments = [ScoreAdjustment("base", float(w.regular_base), "Baseline")]

        if signals.has_ssl:
            adjustments.append(ScoreAdjustment("https", w.https_bonus, "Served over HTTPS"))

        if signals.tld_class == TLDClass.TRUSTED:
            adjustments.append(ScoreAdjustment(
                "tld", w.trusted_tld_bonus, f"Trusted TLD (.{signals.tld})"
            ))
        elif signals.tld_class == TLDClass.SUSPICIOUS:
            adjustments.append(ScoreAdjustment(
                "tld", -w.suspicious_tld_penalty, f"Suspicious TLD (.{signals.tld})"
            ))

        age_points = self._age_points(signals.domain_age_years, w.age_max_bonus)
        if age_points:
            adjustments.append(ScoreAdjustment(
                "domain_age", age_points, f"Registered {signals.domain_age_years:.1f} years ago"
            ))

        if signals.trusted_registrar:
            adjustments.append(ScoreAdjustment(
                "registrar", w.trusted_registrar_bonus, f"Trusted registrar ({signals.registrar})"
            ))

        if signals.scam_keywords:
            adjustments.append(ScoreAdjustment(
                "scam_keywords",
                -self._keyword_penalty(len(signals.scam_keywords)),
                f"{len(signals.scam_keywords)} scam keyword(s) in hostname",
            ))

        return sum(a.points for a in adjustments), adjustments

    def _age_points(self, age_years: Optional[float], max_bonus: float) -> float:
        """Saturating age bonus; unknown age scores zero."""
        if age_years is None or age_years <= 0:
            return 0.0
        saturation = self._weights.age_saturation_years
        return min(age_years, saturation) / saturation * max_bonus

    def _keyword_penalty(self, hits: int) -> float:
        """
        Geometric penalty: first hit costs keyword_first_penalty, each
        further hit costs keyword_decay times the previous one.
        """
        first = self._weights.keyword_first_penalty
        decay = self._weights.keyword_decay
        return sum(first * decay ** i for i in range(hits))


def build_highlights(signals: TrustSignalSet, score: TrustScore) -> TrustHighlights:
    """
    Produce human-readable findings for a scored signal set.

    Args:
        signals: Evidence the score was computed from
        score: The computed score

    Returns:
        TrustHighlights; positive is never empty
    """
    positive: list[str] = []
    negative: list[str] = []

    if signals.is_government:
        positive.append(
            f"This is the official government website of {signals.government_country}"
        )
        positive.append("Government websites are strictly regulated and secure")
    elif signals.is_edu:
        positive.append(
            "This is a .edu domain - restricted to accredited educational institutions only"
        )
        positive.append("Educational domains undergo strict verification before issuance")

    if signals.has_ssl:
        positive.append("We found a valid SSL certificate")
    else:
        negative.append(
            "The website does not have a valid SSL certificate, which is concerning for security"
        )

    age = signals.domain_age_years
    if age is not None:
        if age >= 5:
            positive.append(
                f"This website has been active for {age:.1f} years, indicating established presence"
            )
        elif age >= 2:
            positive.append(f"Domain has been registered for {age:.1f} years")
        elif age < 0.5:
            negative.append("The age of this site is very young (less than 6 months old)")
        elif age < 1:
            negative.append(
                "This is a relatively new domain (less than 1 year old), which requires extra caution"
            )

    if signals.trusted_registrar:
        positive.append(f"Registered through a well-known registrar ({signals.registrar})")

    if signals.tld_class == TLDClass.SUSPICIOUS and not signals.is_government:
        negative.append(f"The .{signals.tld} extension is frequently abused by scam sites")

    hits = len(signals.scam_keywords)
    if hits == 0:
        positive.append("No obvious scam-related keywords were detected in the domain name")
    else:
        plural = "s" if hits > 1 else ""
        negative.append(
            f"The domain contains {hits} suspicious keyword{plural} commonly associated with scams"
        )

    if score.value >= 80:
        positive.append("The website shows multiple positive trust signals")

    if score.value < 40:
        negative.append("The overall trust score is critically low, indicating high risk")
    elif score.value < 60:
        negative.append("The trust score suggests limited positive signals about this website")

    if not positive:
        positive.append("Limited positive information available about this website")
    if not negative and score.value >= 70:
        negative.append("No major red flags detected during our analysis")

    return TrustHighlights(positive=positive, negative=negative)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
