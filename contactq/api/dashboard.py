"""HTML status page."""

from __future__ import annotations

from html import escape

_STYLE = """
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
           line-height: 1.6; max-width: 800px; margin: 0 auto; padding: 20px; color: #333; }
    h1 { color: #25D366; }
    .status { background: #f5f5f5; padding: 15px; border-radius: 5px; margin: 20px 0; }
    .stats { display: flex; gap: 20px; margin: 20px 0; }
    .stat-box { background: white; border: 1px solid #ddd; border-radius: 5px;
                padding: 10px 15px; flex: 1; text-align: center; }
    .stat-value { font-size: 24px; font-weight: bold; color: #25D366; }
"""


def render_dashboard(connected: bool, batch_size: int, ledger_size: int, threshold: int) -> str:
    status = "Connected" if connected else "Disconnected"
    hint = (
        ""
        if connected
        else "<p>Please check the server logs for the QR code to scan with WhatsApp Web</p>"
    )
    send_button = (
        f'<button onclick="fetch(\'/send-batch\', {{method: \'POST\'}})">'
        f"Send Batch Now ({batch_size} contacts)</button>"
        if batch_size > 0
        else ""
    )
    return f"""<!DOCTYPE html>
<html>
<head>
    <title>WhatsApp Contact Saver</title>
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <style>{_STYLE}</style>
</head>
<body>
    <h1>WhatsApp Contact Saver</h1>
    <div class="status">
        <h2>Status: {escape(status)}</h2>
        {hint}
    </div>
    <div class="stats">
        <div class="stat-box">
            <div class="stat-value">{batch_size}</div><div>Contacts in batch</div>
        </div>
        <div class="stat-box">
            <div class="stat-value">{ledger_size}</div><div>Total contacts</div>
        </div>
    </div>
    <p>Every {threshold} new contacts are emailed as a VCF file.</p>
    <div>
        <button onclick="window.location.reload()">Refresh Status</button>
        {send_button}
    </div>
    <script>setTimeout(() => window.location.reload(), 30000);</script>
</body>
</html>
"""
