import html

# ============================================================
# TARJETAS HTML DE LA PÁGINA PÚBLICA
# ============================================================
# Todo texto que llega del backend pasa por html.escape antes de entrar
# en el markup, porque las páginas lo dibujan con unsafe_allow_html=True.

CARD = """
<div style="background-color:#111827;padding:10px 15px;border-radius:10px;
            text-align:center;border:1px solid #374151;">
    <div style="font-size:24px;">{icon}</div>
    <div style="font-size:13px;color:#9CA3AF;">{label}</div>
    <div style="font-size:22px;font-weight:bold;color:white;">{value}</div>
</div>
"""


def card_html(icon, label, value):
    return CARD.format(icon=icon, label=html.escape(str(label)), value=html.escape(str(value)))


def lista_html(titulo, items):
    if not items:
        contenido = "<p style='color:#D1D5DB;'>— Ninguno todavía.</p>"
    else:
        filas = []
        for c in sorted(items, key=lambda c: c.nombre.lower()):
            desc = f" — {html.escape(c.descripcion)}" if c.descripcion else ""
            filas.append(f"<li><b>{html.escape(c.nombre)}</b>{desc}</li>")
        contenido = "<ul style='color:#D1D5DB;'>" + "".join(filas) + "</ul>"
    return f"""
        <div style="background-color:#111827;padding:15px;border-radius:15px;
                    border:1px solid #374151; min-height:150px;">
            <h3 style="color:white;margin-top:0;">{html.escape(titulo)}</h3>
            {contenido}
        </div>
    """
