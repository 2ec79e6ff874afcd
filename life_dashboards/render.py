from __future__ import annotations

import html
import re
from typing import Iterable, Sequence

from life_dashboards.schemas import StoredFile

UPLOAD_ERROR_MESSAGES = {
    "missing_file": "Choose a file before uploading.",
    "store_failed": "The file could not be saved. Please try again.",
}

_SLUG_RE = re.compile(r"[^a-z0-9]+")

PAGE_HEAD = """<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Overview+</title>
  <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css">
  <link rel="stylesheet" href="https://cdn.quilljs.com/1.3.6/quill.snow.css">
  <style>
    .quill-editor { background: #fff; }
    .file-preview { max-width: 100%; height: auto; }
    .avatar { width: 64px; height: 64px; border-radius: 50%; object-fit: cover; }
  </style>
</head>
<body class="bg-light">
"""

# Client side: Quill editors per journal section and a Chart.js matrix heatmap
# filled from /api/heatmap (missing days render as zero).
PAGE_SCRIPTS = """
<script src="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/js/bootstrap.bundle.min.js"></script>
<script src="https://cdn.jsdelivr.net/npm/chart.js@4.4.1/dist/chart.umd.min.js"></script>
<script src="https://cdn.jsdelivr.net/npm/chartjs-chart-matrix@2.0.1/dist/chartjs-chart-matrix.umd.min.js"></script>
<script src="https://cdn.quilljs.com/1.3.6/quill.min.js"></script>
<script>
  window.syncQuill = function(editorId, inputId) {
    const el = document.getElementById(editorId);
    if (!el) return;
    if (!Quill.find(el)) new Quill(el, { theme: 'snow' });
    document.getElementById(inputId).value = el.querySelector('.ql-editor').innerHTML;
  };
  document.querySelectorAll('.quill-editor').forEach(el => { if (!Quill.find(el)) new Quill(el, { theme: 'snow' }); });

  function isoWeek(dt) {
    const date = new Date(Date.UTC(dt.getFullYear(), dt.getMonth(), dt.getDate()));
    const dayNum = date.getUTCDay() || 7;
    date.setUTCDate(date.getUTCDate() + 4 - dayNum);
    const yearStart = new Date(Date.UTC(date.getUTCFullYear(), 0, 1));
    return Math.ceil((((date - yearStart) / 86400000) + 1) / 7);
  }

  const heatmapCanvas = document.getElementById('heatmap');
  if (heatmapCanvas) {
    fetch('/api/heatmap').then(r => r.json()).then(data => {
      const days = {};
      data.forEach(d => { days[d.date] = d.count; });
      const today = new Date();
      const start = new Date(today.getTime() - 365 * 24 * 60 * 60 * 1000);
      const values = [];
      let column = 0;
      let lastWeek = null;
      for (let d = new Date(start); d <= today; d.setDate(d.getDate() + 1)) {
        const key = d.toISOString().slice(0, 10);
        const week = isoWeek(d);
        if (lastWeek !== null && week !== lastWeek) column += 1;
        lastWeek = week;
        values.push({ x: column, y: d.getDay(), v: days[key] || 0, date: key });
      }
      const columns = column + 1;
      new Chart(heatmapCanvas, {
        type: 'matrix',
        data: { datasets: [{
          label: 'Activity Heatmap',
          data: values,
          width: ({ chart }) => (chart.chartArea || {}).width / columns - 2,
          height: ({ chart }) => (chart.chartArea || {}).height / 7 - 2,
          backgroundColor: ctx => {
            const v = ctx.raw.v;
            const a = v ? Math.min(0.1 + v / 5, 1) : 0.05;
            return `rgba(13,110,253,${a})`;
          },
          borderWidth: 1,
          borderColor: 'rgba(0,0,0,0.05)',
        }] },
        options: {
          maintainAspectRatio: false,
          scales: {
            x: { type: 'linear', ticks: { callback: () => '' } },
            y: { type: 'linear', ticks: { callback: v => ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat'][v] } },
          },
          plugins: { legend: { display: false }, tooltip: { callbacks: { label: ctx => `${ctx.raw.date}: ${ctx.raw.v}` } } },
          onClick: (evt) => {
            const ch = evt.chart;
            const points = ch.getElementsAtEventForMode(evt, 'nearest', { intersect: true }, true);
            if (points.length) {
              const raw = ch.data.datasets[points[0].datasetIndex].data[points[0].index];
              location.href = '/?d=' + raw.date;
            }
          },
        },
      });
    });
  }
</script>
</body>
</html>
"""


def _slug(title: str) -> str:
    return _SLUG_RE.sub("-", title.lower()).strip("-") or "entry"


def render_navbar(avatar_url: str) -> str:
    avatar_img = ""
    if avatar_url:
        avatar_img = f'<img src="{html.escape(avatar_url)}" class="avatar me-2" alt="avatar">'
    return f"""
<nav class="navbar navbar-expand navbar-dark bg-dark">
  <div class="container-fluid">
    <a class="navbar-brand" href="/">Overview+</a>
    <div class="ms-auto d-flex align-items-center gap-3">
      <form class="d-flex align-items-center" method="post" action="/profile/avatar" enctype="multipart/form-data">
        {avatar_img}
        <input type="file" name="avatar" accept="image/*" class="form-control form-control-sm me-2">
        <button class="btn btn-outline-light btn-sm" type="submit">Upload Avatar</button>
      </form>
    </div>
  </div>
</nav>
"""


def render_error_alert(error: str | None) -> str:
    if not error:
        return ""
    message = UPLOAD_ERROR_MESSAGES.get(error, "Something went wrong with that upload.")
    return f"""
    <div class="col-12">
      <div class="alert alert-warning alert-dismissible fade show" role="alert">
        {html.escape(message)}
        <button type="button" class="btn-close" data-bs-dismiss="alert" aria-label="Close"></button>
      </div>
    </div>
"""


def render_heatmap_card() -> str:
    return """
    <div class="col-12">
      <div class="card">
        <div class="card-header d-flex justify-content-between align-items-center">
          <span>Activity Heatmap</span>
          <small class="text-muted">Journals + Todos + Habits</small>
        </div>
        <div class="card-body" style="height:200px">
          <canvas id="heatmap"></canvas>
        </div>
      </div>
    </div>
"""


def render_journal_card(day: str, title: str, content: str) -> str:
    # Content is editor markup and goes in unescaped.
    slug = _slug(title)
    return f"""
    <div class="col-md-6">
      <div class="card">
        <div class="card-header">{html.escape(title)} ({html.escape(day)})</div>
        <div class="card-body">
          <form method="post" action="/journal/save">
            <input type="hidden" name="entry_date" value="{html.escape(day)}">
            <input type="hidden" name="title" value="{html.escape(title)}">
            <div id="{slug}-editor" class="quill-editor" style="height:150px;">{content}</div>
            <input type="hidden" id="{slug}-content" name="content">
            <button class="btn btn-primary mt-2" type="submit" onclick="syncQuill('{slug}-editor','{slug}-content')">Save</button>
          </form>
        </div>
      </div>
    </div>
"""


def render_file_preview(item: StoredFile) -> str:
    src = f"/files/view?id={int(item.id)}"
    mime_type = item.mime_type or ""
    if mime_type.startswith("image/"):
        body = f'<img src="{src}" class="file-preview" alt="image">'
    elif mime_type == "application/pdf":
        body = f'<iframe src="{src}" style="width:100%;height:220px" title="pdf"></iframe>'
    else:
        body = f'<a href="{src}" target="_blank" rel="noopener">Open</a>'
    return f"""
            <div class="col">
              <div class="card h-100">
                <div class="card-body">
                  <div class="mb-2"><strong>{html.escape(item.original_name)}</strong></div>
                  {body}
                </div>
              </div>
            </div>"""


def render_files_card(files: Iterable[StoredFile]) -> str:
    previews = "".join(render_file_preview(item) for item in files)
    return f"""
    <div class="col-12">
      <div class="card">
        <div class="card-header">Upload Files (inline viewing)</div>
        <div class="card-body">
          <form method="post" action="/files/upload" enctype="multipart/form-data" class="d-flex gap-2">
            <input type="file" name="file" class="form-control" accept="image/*,.pdf,.txt,.md">
            <button class="btn btn-outline-primary" type="submit">Upload</button>
          </form>
          <div class="row row-cols-1 row-cols-md-3 g-3 mt-2">{previews}
          </div>
        </div>
      </div>
    </div>
"""


def render_dashboard(
    day: str,
    sections: Sequence[tuple[str, str]],
    files: Iterable[StoredFile],
    avatar_url: str = "",
    error: str | None = None,
) -> str:
    journal_cards = "".join(render_journal_card(day, title, content) for title, content in sections)
    return (
        PAGE_HEAD
        + render_navbar(avatar_url)
        + '\n<div class="container py-4">\n  <div class="row g-3">'
        + render_error_alert(error)
        + render_heatmap_card()
        + journal_cards
        + render_files_card(files)
        + "  </div>\n</div>\n"
        + PAGE_SCRIPTS
    )
