"""Static plan catalogue shown on the public pricing pages."""

from __future__ import annotations

from koomy.models.domain import Plan

DEFAULT_PLAN_ID = "free"

STATIC_PLANS: tuple[Plan, ...] = (
    Plan(
        id="free",
        code="STARTER_FREE",
        name="Free Starter",
        description="Idéal pour les petites communautés qui débutent",
        max_members=50,
        price_monthly=0,
        price_yearly=0,
        features=[
            "Jusqu'à 50 membres",
            "Cartes de membre digitales",
            "Fil d'actualités",
            "Événements basiques",
            "Support par email",
        ],
        sort_order=1,
    ),
    Plan(
        id="growth",
        code="COMMUNAUTE_STANDARD",
        name="Communauté Plus",
        description="Pour les associations et clubs en croissance",
        max_members=1000,
        price_monthly=990,
        price_yearly=9900,
        features=[
            "Jusqu'à 1 000 membres",
            "Cartes de membre avec QR code",
            "Gestion des cotisations",
            "Événements et inscriptions",
            "Messagerie membres-admins",
            "Statistiques de base",
            "Support prioritaire",
        ],
        is_popular=True,
        sort_order=2,
    ),
    Plan(
        id="scale",
        code="COMMUNAUTE_PRO",
        name="Communauté Pro",
        description="Pour les grandes organisations avec des besoins avancés",
        max_members=5000,
        price_monthly=2900,
        price_yearly=29000,
        features=[
            "Jusqu'à 5 000 membres",
            "Multi-administrateurs avec rôles",
            "Sections/régions illimitées",
            "Personnalisation complète",
            "Analytiques avancées",
            "Export de données",
            "Intégrations API",
            "Support 24/7",
        ],
        sort_order=3,
    ),
    Plan(
        id="enterprise",
        code="ENTREPRISE_CUSTOM",
        name="Grand Compte",
        description="Solution sur mesure pour les très grandes organisations",
        features=[
            "Membres illimités",
            "Configuration personnalisée",
            "Manager de succès dédié",
            "Intégrations sur mesure",
            "SLA garanti",
            "Formation des équipes",
            "Sécurité renforcée",
            "Support prioritaire 24/7",
        ],
        is_custom=True,
        sort_order=4,
    ),
    Plan(
        id="whitelabel",
        code="WHITE_LABEL",
        name="Koomy White Label",
        description="Votre propre plateforme à vos couleurs",
        price_yearly=490000,
        features=[
            "Plateforme en marque blanche",
            "Nom de domaine personnalisé",
            "Branding complet",
            "App mobile personnalisée",
            "Membres illimités",
            "Toutes les fonctionnalités Pro",
            "Support dédié premium",
            "Maintenance incluse",
        ],
        is_white_label=True,
        sort_order=5,
    ),
)

PLANS_BY_ID: dict[str, Plan] = {plan.id: plan for plan in STATIC_PLANS}


def get_plan(plan_id: str | None) -> Plan:
    """Get a plan by id, defaulting to the free tier."""
    if plan_id is None:
        return PLANS_BY_ID[DEFAULT_PLAN_ID]
    return PLANS_BY_ID.get(plan_id, PLANS_BY_ID[DEFAULT_PLAN_ID])


def public_plans() -> list[Plan]:
    """Plans listed on the pricing page, in display order."""
    return sorted((p for p in STATIC_PLANS if p.is_public), key=lambda p: p.sort_order)


def is_unlimited(plan: Plan) -> bool:
    return plan.max_members is None
