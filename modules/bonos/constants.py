"""
Constantes del motor de bonos: pesos por seniority, umbrales y defaults
de objetivos corporativos.
"""

# ============================================
# SENIORITY
# ============================================
# Niveles detallados: 1.1-1.4 (Jr), 2.1-2.4 (Ssr), 3.1-3.4 (Sr), 4.1-4.4 (Líder), 5.1-5.4 (C-Level)
TIER_MINIMO = 1
TIER_MAXIMO = 5

SENIORITY_CATEGORY_LABELS = {
    1: "Jr.",
    2: "Ssr.",
    3: "Sr.",
    4: "Líder",
    5: "C-Level",
}

LABEL_SIN_SENIORITY = "Sin definir"

# ============================================
# PESOS POR TIER (empresa / área)
# ============================================
SENIORITY_WEIGHTS = {
    1: {"company": 30, "area": 70},  # Jr
    2: {"company": 40, "area": 60},  # Ssr
    3: {"company": 60, "area": 40},  # Sr
    4: {"company": 70, "area": 30},  # Líder
    5: {"company": 70, "area": 30},  # C-Level (igual que Líder)
}

# Distribución informativa por objetivo (se reporta, no participa del cálculo)
OBJECTIVE_WEIGHT_DISTRIBUTION = {
    1: {"billing": 15, "nps": 15, "area1": 35, "area2": 35},
    2: {"billing": 20, "nps": 20, "area1": 30, "area2": 30},
    3: {"billing": 30, "nps": 30, "area1": 20, "area2": 20},
    4: {"billing": 35, "nps": 35, "area1": 15, "area2": 15},
    5: {"billing": 35, "nps": 35, "area1": 15, "area2": 15},
}

# ============================================
# COMPONENTE EMPRESA (no depende del tier)
# ============================================
PESO_FACTURACION = 70
"""Peso de facturación (billing) dentro del componente empresa"""

PESO_NPS = 30
"""Peso del NPS dentro del componente empresa"""

GATE_DEFAULT = 90.0
"""% mínimo del target para que la facturación otorgue crédito"""

CAP_DEFAULT = 150.0
"""Tope del % de cumplimiento reportado"""

COMPLETION_MAXIMA = 100.0
"""Tope del valor que alimenta el score"""

TIPO_FACTURACION = "billing"
TIPO_NPS = "nps"

QUARTERS = ("q1", "q2", "q3", "q4")

# ============================================
# OBJETIVOS PERSONALES
# ============================================
PERIODICIDAD_ANUAL = "annual"

POLITICA_SUBCONJUNTO_EVALUADO = "evaluated_subset"
POLITICA_TODOS_REQUERIDOS = "all_required"
POLITICAS_SUBOBJETIVOS = (POLITICA_SUBCONJUNTO_EVALUADO, POLITICA_TODOS_REQUERIDOS)

# ============================================
# PRORRATEO
# ============================================
PRORRATEO_MESES = "months"
PRORRATEO_DIAS = "days"
MODOS_PRORRATEO = (PRORRATEO_MESES, PRORRATEO_DIAS)

DEPARTAMENTO_DEFAULT = "Sin área"
