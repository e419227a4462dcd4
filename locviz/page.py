"""Generate the self-contained meta page: stats, scatter plot, breakdown, slider, narrative."""

import html
import json
import logging
from collections.abc import Sequence
from pathlib import Path

from locviz.config import Config, SiteConfig, SliderConfig
from locviz.explorer import CommitExplorer, VizContext
from locviz.models import Commit, ThemePreference
from locviz.scroller import NarrativeScroller
from locviz.surface import Panels, SVGSurface, require_target
from locviz.theme import ThemeStore
from locviz.time_filter import TimeFilter

logger = logging.getLogger(__name__)

THEME_OPTIONS = [
    (ThemePreference.AUTO, "Automatic"),
    (ThemePreference.LIGHT, "Light"),
    (ThemePreference.DARK, "Dark"),
]

_CSS = """
  body { font: 100%/1.5 system-ui, sans-serif; max-width: 100ch; margin-inline: auto; padding: 1em; }
  nav { display: flex; gap: 1em; border-bottom: 1px solid oklch(80% 3% 200); margin-bottom: 1em; }
  nav a { flex: 1; text-align: center; padding: 0.5em; text-decoration: none; color: inherit; }
  nav a.current { border-bottom: 0.4em solid oklch(80% 3% 200); padding-bottom: 0.1em; }
  label.color-scheme { position: absolute; top: 1rem; right: 1rem; font-size: 80%; }
  dl.stats { display: grid; grid-template-columns: repeat(4, 1fr); gap: 0.25em 1em; }
  dl.stats dt { grid-row: 1; font-size: 70%; text-transform: uppercase; opacity: 0.7; }
  dl.stats dd { grid-row: 2; margin: 0; font-size: 150%; }
  .chart circle { transition: 200ms; transform-origin: center; transform-box: fill-box; }
  .chart circle:hover { transform: scale(1.5); fill-opacity: 1 !important; }
  .chart circle.selected { fill: #ff6b6b; }
  .files > div { display: grid; grid-template-columns: subgrid; grid-column: 1 / -1; }
  .files { display: grid; grid-template-columns: 1fr 4fr; }
  .files dd { display: flex; flex-wrap: wrap; align-items: start; align-content: start; gap: 0.15em; margin: 0; }
  .files small { display: block; font-size: 75%; opacity: 0.7; }
  .loc { width: 0.5em; aspect-ratio: 1; background: var(--color); border-radius: 50%; }
  #language-breakdown dt { color: var(--color); font-weight: bold; }
  #scrollytelling { display: grid; grid-template-columns: 1fr 2fr; gap: 1em; }
  #scroll-container .step { padding-bottom: 60vh; }
  #chart-column { position: sticky; top: 1em; align-self: start; }
  .frame[hidden] { display: none; }
"""

_SCRIPT = """
const select = document.querySelector('#theme_selector');
if (localStorage.colorScheme) {
  document.documentElement.style.setProperty('color-scheme', localStorage.colorScheme);
  select.value = localStorage.colorScheme;
}
select.addEventListener('input', (event) => {
  document.documentElement.style.setProperty('color-scheme', event.target.value);
  localStorage.colorScheme = event.target.value;
});

const frames = Array.from(document.querySelectorAll('.frame'));
const slider = document.querySelector('#commit-progress');
const label = document.querySelector('#selectedTime');
const labels = JSON.parse(slider.dataset.labels);

function showFrame(frame) {
  frames.forEach((f) => { f.hidden = f !== frame; });
  label.textContent = frame.dataset.label;
}

function frameForProgress(progress) {
  let best = frames[0];
  for (const f of frames) {
    if (Number(f.dataset.progress) <= progress) best = f;
  }
  return best;
}

slider.addEventListener('input', () => {
  showFrame(frameForProgress(Number(slider.value)));
  label.textContent = labels[slider.value] ?? label.textContent;
});

const observer = new IntersectionObserver((entries) => {
  for (const entry of entries) {
    if (!entry.isIntersecting) continue;
    const frame = frames.find((f) => f.dataset.step === entry.target.dataset.step);
    if (frame) {
      slider.value = frame.dataset.progress;
      showFrame(frame);
    }
  }
}, { rootMargin: '-50% 0px -50% 0px' });
document.querySelectorAll('.step').forEach((step) => observer.observe(step));
"""


def render_nav(site: SiteConfig, local: bool = False) -> str:
    base = site.local_base_path if local else site.base_path
    links = []
    for page in site.pages:
        external = page.url.startswith("http")
        url = page.url if external else base + page.url
        classes = "current" if page.url == site.current_page else "noncurrent"
        target = ' target="_blank"' if external else ""
        links.append(f'<a href="{html.escape(url)}" class="{classes}"{target}>{html.escape(page.title)}</a>')
    return "<nav>\n  " + "\n  ".join(links) + "\n</nav>"


def render_theme_selector(pref: ThemePreference) -> str:
    options = "".join(
        f'<option value="{p.css_value}"{" selected" if p is pref else ""}>{label}</option>'
        for p, label in THEME_OPTIONS
    )
    return (
        '<label class="color-scheme">Theme:\n'
        f'  <select id="theme_selector">{options}</select>\n'
        "</label>"
    )


def slider_labels(commits: Sequence[Commit], slider: SliderConfig) -> dict[str, str]:
    """Cutoff label for every slider position, keyed the way the browser reports input values."""
    tf = TimeFilter(commits, slider)
    positions = round((slider.maximum - slider.minimum) / slider.step)
    labels = {}
    for i in range(positions + 1):
        progress = min(slider.minimum + i * slider.step, slider.maximum)
        tf.set_progress(progress)
        labels[f"{progress:g}"] = tf.cutoff_label()
    return labels


def _render_frame(explorer: CommitExplorer, surface: SVGSurface, progress: float, step: int | None) -> str:
    view = explorer.set_progress(progress)
    panels = explorer.panels
    files = require_target(panels.files, "files")
    languages = require_target(panels.languages, "language-breakdown")
    label = explorer.context.time_filter.cutoff_label()
    step_attr = f' data-step="{step}"' if step is not None else ""
    return (
        f'<div class="frame" data-progress="{explorer.context.time_filter.progress:.4f}"'
        f'{step_attr} data-label="{html.escape(label)}" hidden>\n'
        f"{surface.to_svg()}\n"
        f"<p>{len(view.commits)} commits · {len(view.lines)} lines</p>\n"
        f'<dl class="files">{files.html}</dl>\n'
        f'<dl id="language-breakdown" class="stats">{languages.html}</dl>\n'
        "</div>"
    )


def render_page(context: VizContext, theme: ThemePreference, local: bool = False) -> str:
    """Pre-render one frame per narrative step plus the full view."""
    config = context.config
    surface = SVGSurface(config.chart.width, config.chart.height)
    explorer = CommitExplorer(context, surface, Panels())
    explorer.initial_render()
    stats_html = require_target(explorer.panels.stats, "stats").html

    scroller = NarrativeScroller(explorer)
    tf = context.time_filter
    frames = [
        _render_frame(explorer, surface, tf.progress_for(context.commits[step.index]), step.index)
        for step in scroller.steps
    ]
    # Full view last, shown initially
    frames.append(_render_frame(explorer, surface, config.slider.maximum, None).replace(" hidden>", ">", 1))

    steps_html = "\n".join(
        f'<div class="step" data-step="{s.index}"><p>{s.text}</p></div>' for s in scroller.steps
    )
    slider = config.slider

    return f"""<!DOCTYPE html>
<html lang="en" style="color-scheme: {theme.css_value}">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Meta</title>
<style>{_CSS}</style>
</head>
<body>
{render_theme_selector(theme)}
{render_nav(config.site, local=local)}

<h1>Meta</h1>
<p>This page includes stats about the code of this website.</p>

<section id="stats">
{stats_html}
</section>

<label>
  Show commits until:
  <input type="range" id="commit-progress" min="{slider.minimum}" max="{slider.maximum}"
         step="{slider.step}" value="{slider.maximum}"
         data-labels="{html.escape(json.dumps(slider_labels(context.commits, slider)))}">
  <time id="selectedTime">{html.escape(tf.cutoff_label())}</time>
</label>

<div id="scrollytelling">
  <div id="scroll-container">
{steps_html}
  </div>
  <div id="chart-column">
{chr(10).join(frames)}
  </div>
</div>

<script>{_SCRIPT}</script>
</body>
</html>"""


def build_site(config: Config, output_dir: Path | None = None, local: bool = False) -> Path:
    """Load the log and write ``index.html``. Returns the output path."""
    context = VizContext.load(config)
    theme = ThemeStore(config.resolved_preferences_path).load()
    page = render_page(context, theme, local=local)

    if output_dir is None:
        output_dir = config.resolved_output_dir
    output_path = output_dir / "index.html"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(page, encoding="utf-8")
    logger.info("Meta page written to %s (%d commits)", output_path, len(context.commits))
    return output_path
