"""Configuration models: tier tables, category rules, pair lists, recommendation rules.

Every knob the engine uses is carried here as data. ``AnalyticsConfig()``
yields the same defaults as the packaged ``config.yaml``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from workpulse.errors import ConfigurationError
from workpulse.models.enums import ItemFraming, MacroCategory, RecommendationLevel, RiskTier

SURVEY_ITEMS: tuple[int, ...] = tuple(range(1, 13))
MIN_ANSWER = 0
MAX_ANSWER = 3


class TierBand(BaseModel):
    """One tier of a score scheme: scores up to ``upper`` (inclusive) land here."""

    tier: str
    upper: float
    label: str = ""


class TierScheme(BaseModel):
    """Ordered score-to-tier classification over [min_score, max_score]."""

    bands: list[TierBand]
    min_score: float = 0
    max_score: float = 36

    @model_validator(mode="after")
    def _check_bands(self) -> TierScheme:
        if not self.bands:
            raise ValueError("Tier scheme needs at least one band")
        lowest, highest = MIN_ANSWER * len(SURVEY_ITEMS), MAX_ANSWER * len(SURVEY_ITEMS)
        if self.min_score > lowest or self.max_score < highest:
            raise ValueError(
                f"Tier scheme range [{self.min_score}, {self.max_score}] must cover "
                f"every possible total [{lowest}, {highest}]"
            )
        uppers = [b.upper for b in self.bands]
        if any(lo >= hi for lo, hi in zip(uppers, uppers[1:])):
            raise ValueError(f"Tier upper bounds must be strictly increasing, got {uppers}")
        if uppers[-1] != self.max_score:
            raise ValueError(
                f"Last tier must end at max_score {self.max_score}, got {uppers[-1]}"
            )
        tiers = [b.tier for b in self.bands]
        if len(set(tiers)) != len(tiers):
            raise ValueError(f"Duplicate tier names in {tiers}")
        return self

    @property
    def tiers(self) -> list[str]:
        """Tier names, lowest risk first."""
        return [b.tier for b in self.bands]


class TierWeightTable(BaseModel):
    """Per-tier weights for the heatmap's weighted average risk."""

    weights: dict[str, float]

    @field_validator("weights")
    @classmethod
    def _check_weights(cls, value: dict[str, float]) -> dict[str, float]:
        if not value:
            raise ValueError("Weight table must not be empty")
        for tier, weight in value.items():
            if not 0.0 <= weight <= 1.0:
                raise ValueError(f"Weight for tier '{tier}' must be in [0, 1], got {weight}")
        return value

    @property
    def tiers(self) -> list[str]:
        return list(self.weights)

    def weight(self, tier: str) -> float:
        """Weight for a tier; a tier without an entry is a configuration error."""
        if tier not in self.weights:
            raise ConfigurationError(
                f"Tier '{tier}' has no weight (known tiers: {', '.join(self.weights)})"
            )
        return self.weights[tier]


class CategoryRule(BaseModel):
    """Keyword set mapping free-text labels onto one macro-category."""

    category: str
    keywords: list[str]


class CorrelationPairSpec(BaseModel):
    """A variable pair to correlate; variables are named extractors."""

    x: str
    y: str
    label: str = ""

    @property
    def pair_id(self) -> str:
        return f"{self.x}~{self.y}"


class RecommendationRule(BaseModel):
    """Threshold rule for critical-group recommendations.

    ``metric`` is ``weighted_average`` or a tier name (that tier's percentage);
    the rule matches when the metric strictly exceeds ``threshold``. A rule
    with no metric always matches and acts as the fallback.
    """

    metric: str | None = None
    threshold: float = 0.0
    level: RecommendationLevel
    message: str


class Band(BaseModel):
    """Half-open numeric band [lower, upper) used for age and tenure grouping."""

    label: str
    lower: float
    upper: float | None = None

    def contains(self, value: float) -> bool:
        return value >= self.lower and (self.upper is None or value < self.upper)


DEFAULT_SCORE_TIERS = TierScheme(
    bands=[
        TierBand(tier=RiskTier.LOW.value, upper=9, label="Low"),
        TierBand(tier=RiskTier.MODERATE.value, upper=18, label="Moderate"),
        TierBand(tier=RiskTier.HIGH.value, upper=27, label="High"),
        TierBand(tier=RiskTier.VERY_HIGH.value, upper=36, label="Very High"),
    ],
)

DEFAULT_HEATMAP_WEIGHTS = TierWeightTable(
    weights={
        RiskTier.VERY_LOW.value: 0.1,
        RiskTier.LOW.value: 0.3,
        RiskTier.MODERATE.value: 0.5,
        RiskTier.HIGH.value: 0.7,
        RiskTier.VERY_HIGH.value: 0.9,
    }
)

DEFAULT_ITEM_FRAMING: dict[int, ItemFraming] = {
    item: ItemFraming.POSITIVE if item in (1, 3, 4, 7, 8, 12) else ItemFraming.NEGATIVE
    for item in SURVEY_ITEMS
}

DEFAULT_CATEGORY_RULES: list[CategoryRule] = [
    CategoryRule(
        category=MacroCategory.ADMINISTRATION_HR.value,
        keywords=[
            "administracion", "administrador", "administrativ", "rrhh", "recursos humanos",
            "finanzas", "contabilidad", "secretaria", "tesoreria", "nomina",
            "administration", "human resources", "finance", "accounting", "payroll",
            "treasury", "secretary",
        ],
    ),
    CategoryRule(
        category=MacroCategory.ENGINEERING_PROJECTS.value,
        keywords=[
            "ingeniero", "ingenieria", "proyectos", "coordinador de area", "diseno",
            "planificacion", "desarrollo", "tecnico especialista",
            "engineer", "project", "design", "planning", "development",
        ],
    ),
    CategoryRule(
        category=MacroCategory.OPERATIONS_MAINTENANCE.value,
        keywords=[
            "operacion", "operador", "mantenimiento", "mecanico", "electricista",
            "ayudante de maquina", "soldador", "produccion",
            "operator", "operations", "maintenance", "mechanic", "electrician",
            "welder", "production",
        ],
    ),
    CategoryRule(
        category=MacroCategory.SAFETY_HEALTH_ENVIRONMENT.value,
        keywords=[
            "seguridad", "hse", "salud ocupacional", "medio ambiente", "prevencionista",
            "higiene industrial",
            "safety", "occupational health", "environment",
        ],
    ),
    CategoryRule(
        category=MacroCategory.LOGISTICS_SUPPLY.value,
        keywords=[
            "logistica", "suministros", "almacen", "inventario", "compras", "procurement",
            "bodega", "distribucion",
            "logistics", "supply", "warehouse", "inventory", "purchasing", "distribution",
        ],
    ),
    CategoryRule(
        category=MacroCategory.SERVICES_SUPPORT.value,
        keywords=[
            "vigilante", "chofer", "servicios", "limpieza", "jardineria", "cocina",
            "mensajeria", "recepcion", "porteria", "transporte",
            "guard", "driver", "services", "cleaning", "gardening", "kitchen",
            "courier", "reception", "transport",
        ],
    ),
    CategoryRule(
        category=MacroCategory.QUALITY_CONTROL.value,
        keywords=[
            "calidad", "control", "inspector", "auditor", "laboratorio", "ensayos",
            "certificacion", "metrologia",
            "quality", "laboratory", "testing", "certification", "metrology",
        ],
    ),
    CategoryRule(
        category=MacroCategory.MANAGEMENT.value,
        keywords=[
            "gerente", "director", "jefe", "coordinador general", "superintendente",
            "lider", "supervisor general", "ejecutivo",
            "manager", "head of", "superintendent", "leader", "executive",
        ],
    ),
]

DEFAULT_CORRELATION_PAIRS: list[CorrelationPairSpec] = [
    CorrelationPairSpec(x="tenure_years", y="total_score", label="Tenure vs GHQ-12 score"),
    CorrelationPairSpec(
        x="management_confidence", y="job_satisfaction",
        label="Confidence in management vs job satisfaction",
    ),
    CorrelationPairSpec(x="motivation", y="total_score", label="Motivation vs GHQ-12 score"),
    CorrelationPairSpec(
        x="uses_protective_equipment", y="had_prior_incident",
        label="Protective equipment use vs incident history",
    ),
    CorrelationPairSpec(x="age", y="total_score", label="Age vs GHQ-12 score"),
    CorrelationPairSpec(x="gender=female", y="motivation", label="Gender vs motivation"),
    CorrelationPairSpec(
        x="job_satisfaction", y="uses_protective_equipment",
        label="Job satisfaction vs protective equipment use",
    ),
]

DEFAULT_RECOMMENDATION_RULES: list[RecommendationRule] = [
    RecommendationRule(
        metric=RiskTier.VERY_HIGH.value, threshold=50,
        level=RecommendationLevel.CRITICAL_INTERVENTION,
        message="Immediate critical intervention in {group} ({value:.1f}% at very high risk)",
    ),
    RecommendationRule(
        metric=RiskTier.HIGH.value, threshold=30,
        level=RecommendationLevel.PRIORITY_PROGRAM,
        message="Priority wellbeing program for {group} ({value:.1f}% at high risk)",
    ),
    RecommendationRule(
        metric=RiskTier.MODERATE.value, threshold=40,
        level=RecommendationLevel.PREVENTIVE_PROGRAM,
        message="Preventive program in {group} ({value:.1f}% at moderate risk)",
    ),
    RecommendationRule(
        level=RecommendationLevel.MAINTAIN_PRACTICES,
        message="Maintain current practices in {group}",
    ),
]

DEFAULT_AGE_BANDS: list[Band] = [
    Band(label="<26", lower=0, upper=26),
    Band(label="26-35", lower=26, upper=36),
    Band(label="36-45", lower=36, upper=46),
    Band(label="46-55", lower=46, upper=56),
    Band(label="56+", lower=56),
]

DEFAULT_TENURE_BANDS: list[Band] = [
    Band(label="<1", lower=0, upper=1),
    Band(label="1-3", lower=1, upper=3),
    Band(label="3-5", lower=3, upper=5),
    Band(label="5-10", lower=5, upper=10),
    Band(label="10+", lower=10),
]


class AnalyticsConfig(BaseModel):
    """Complete engine configuration."""

    score_tiers: TierScheme = Field(default_factory=lambda: DEFAULT_SCORE_TIERS.model_copy(deep=True))
    heatmap_weights: TierWeightTable = Field(
        default_factory=lambda: DEFAULT_HEATMAP_WEIGHTS.model_copy(deep=True)
    )
    high_risk_tiers: list[str] = Field(
        default_factory=lambda: [RiskTier.HIGH.value, RiskTier.VERY_HIGH.value]
    )
    item_framing: dict[int, ItemFraming] = Field(default_factory=lambda: dict(DEFAULT_ITEM_FRAMING))
    category_rules: list[CategoryRule] = Field(
        default_factory=lambda: [r.model_copy(deep=True) for r in DEFAULT_CATEGORY_RULES]
    )
    default_category: str = MacroCategory.SERVICES_SUPPORT.value
    unspecified_category: str = MacroCategory.UNSPECIFIED.value
    correlation_pairs: list[CorrelationPairSpec] = Field(
        default_factory=lambda: [p.model_copy() for p in DEFAULT_CORRELATION_PAIRS]
    )
    recommendation_rules: list[RecommendationRule] = Field(
        default_factory=lambda: [r.model_copy() for r in DEFAULT_RECOMMENDATION_RULES]
    )
    critical_top_n: int = Field(5, ge=1)
    critical_min_risk: float = 40.0
    critical_threshold: float = 40.0
    min_group_size: int = Field(3, ge=1)
    age_bands: list[Band] = Field(default_factory=lambda: [b.model_copy() for b in DEFAULT_AGE_BANDS])
    tenure_bands: list[Band] = Field(
        default_factory=lambda: [b.model_copy() for b in DEFAULT_TENURE_BANDS]
    )

    @model_validator(mode="after")
    def _check_consistency(self) -> AnalyticsConfig:
        unknown = set(self.high_risk_tiers) - set(self.score_tiers.tiers)
        if unknown:
            raise ValueError(f"high_risk_tiers not in score scheme: {sorted(unknown)}")
        if set(self.item_framing) != set(SURVEY_ITEMS):
            raise ValueError("item_framing must cover items 1-12 exactly")
        if self.default_category == self.unspecified_category:
            raise ValueError("default_category and unspecified_category must differ")
        return self
