# server/report_api/services/llm_prompts.py

# Shared by every mode; avoids asserting "recent" facts
SYSTEM_PROMPT = """Eres un agente especializado en Social Media para Lilly México (farmacéutica).
Tu trabajo es generar reportes robustos y accionables para LinkedIn, Instagram, Facebook y TikTok,
con enfoque en comunicación responsable en salud.

Reglas críticas:
- NO afirmes “cambios recientes del algoritmo” como hechos verificables (no hay navegación web).
- NO inventes métricas, % exactos, ni “top posts reales” con rendimiento.
- Si mencionas tendencias, hazlo como "patrones y mejores prácticas observadas" o "hipótesis".
- Incluye consideraciones de compliance (claims, referencias, tono, riesgos).
- Devuelve EXCLUSIVAMENTE JSON válido que cumpla el schema solicitado."""

# MODE tendencias_lilly_mx = monthly trends report
TRENDS_USER = """Necesito un REPORTE MENSUAL DE TENDENCIAS para Social Media de Lilly México.

Contexto fijo:
- Marca: Lilly México (farmacéutica)
- Plataformas: LinkedIn, Instagram, Facebook, TikTok
- Importante: No hay navegación web. No inventes métricas, ni “top posts reales”.
- Sí puedes proponer fuentes RECOMENDADAS con links y referencias en APA (como respaldo), sin afirmar consulta.

Entrega EXACTAMENTE (concisamente):
1) executive_summary: 3–4 bullets (máx 180 caracteres c/u)
2) last_month_patterns: 5–6 bullets (máx 170 caracteres)
3) next_month_opportunities: 5–6 bullets (máx 170 caracteres; si hay efemérides, di “validar fecha”)
4) weekly_calendar: 4 semanas, 3 items por semana (máx 90–140 caracteres por campo)
5) priority_topics: 8 temas exactos (strings cortos)
6) recommended_sources: 6–8 fuentes con url (OMS/OPS/CDC/NIH/PubMed/guías)
7) apa_references: 6–8 referencias APA (máx 220 caracteres)
8) charts:
   - format_mix: 3–5 labels + values que sumen ~100
   - opportunities_per_week: 4 labels + values = número de items por semana

Devuelve SOLO JSON válido."""

# MODE conducta_lilly_mx = behaviour / format guidelines (kept short so it is not truncated)
BEHAVIOR_USER = """Necesito un REPORTE DE CONDUCTA / DIRECTRICES DE FORMATO para Lilly México
en LinkedIn, Instagram, Facebook y TikTok.

REGLAS DE CONCISIÓN (OBLIGATORIO):
- Cada string (bullet) debe tener máximo 120 caracteres.
- No uses "•" ni "-" al inicio.
- No repitas ideas.
- Evita párrafos: solo frases cortas.

Entrega EXACTAMENTE:
1) executive_summary: 3 bullets
2) platform_guidelines: 4 objetos (uno por plataforma) con:
   - goals: 2 bullets
   - signals: 3 bullets (frases accionables, no palabras sueltas)
   - recommended_formats: 2 formatos (specs en 1 frase)
   - copy_guidelines: 4 bullets
3) format_checklist: 4 formatos (video corto, carrusel, estático, stories) con 4 checkpoints c/u
4) compliance_risks: 6 bullets
5) charts.format_mix_by_platform:
   - platforms: 4
   - formats: 3 a 4
   - values: 4 filas que sumen ~100

No incluyas fuentes ni APA en este modo."""

# MODE tendencias = legacy trends (old tendencias.html still sends platform/region/days/topic)
LEGACY_TRENDS_USER = """Parámetros:
- Plataforma: {{PLATFORM}}
- Región: {{REGION}}
- Ventana: últimos {{DAYS}} días
- Tema (opcional): {{TOPIC}}

Entrega:
- "top5": 5 bullets concretos sobre lo que más creció/funcionó en la ventana indicada.
- "forecast": 3 bullets con hipótesis para el próximo mes (temas/formatos a apostar).
- Evita números inventados; usa lenguaje de tendencia.
- Tono ejecutivo.
- Devuelve texto limpio (sin empezar con "•" o "-")."""
