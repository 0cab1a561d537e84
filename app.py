"""kpwgen -- Streamlit web interface."""

import hashlib
import hmac
import secrets

import streamlit as st

from kpwgen import config
from kpwgen.clipboard import CopiedIndicator, copy_text
from kpwgen.errors import KpwgenError
from kpwgen.export import render_export
from kpwgen.history import HistoryStore
from kpwgen.models import AdvancedParams
from kpwgen.orchestrator import GenerationOrchestrator
from kpwgen.settings_store import JsonFileStorage, PersistedSettingsStore
from kpwgen.strength import score_strength
from kpwgen.validation import account_count_mismatch, progress_step

config.setup_logging()

# ── Lucide icons (from lucide.dev) ────────────────────────────────────────

_LUCIDE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="{s}" height="{s}" '
    'viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" '
    'stroke-linecap="round" stroke-linejoin="round">{paths}</svg>'
)

ICON_SHIELD = _LUCIDE.format(s=32, paths=(
    '<path d="M20 13c0 5-3.5 7.5-7.66 8.95a1 1 0 0 1-.67-.01'
    'C7.5 20.5 4 18 4 13V6a1 1 0 0 1 1-1c2 0 4.5-1.2 6.24-2.72'
    'a1.17 1.17 0 0 1 1.52 0C14.51 3.81 17 5 19 5a1 1 0 0 1 1 1z"/>'
))

ICON_HISTORY = _LUCIDE.format(s=20, paths=(
    '<path d="M3 12a9 9 0 1 0 9-9 9.75 9.75 0 0 0-6.74 2.74L3 8"/>'
    '<path d="M3 3v5h5"/><path d="M12 7v5l4 2"/>'
))

STRENGTH_COLORS = {
    "weak": "#94a3b8",
    "medium": "#64748b",
    "strong": "#3b82f6",
    "excellent": "#60a5fa",
}

# ── Page config ───────────────────────────────────────────────────────────

st.set_page_config(
    page_title="kpwgen",
    page_icon="\U0001f510",
    layout="centered",
)

# Always show copy-to-clipboard button on code blocks
st.markdown("""<style>
[data-testid="stCode"] button,
[data-testid="stCodeBlock"] button,
.stCode button,
.stCodeBlock button {
    opacity: 1 !important;
    visibility: visible !important;
    transition: none !important;
}
</style>""", unsafe_allow_html=True)

# ── Session state ─────────────────────────────────────────────────────────

ss = st.session_state

if "store" not in ss:
    ss.store = PersistedSettingsStore(JsonFileStorage(config.storage_file()))
    ss.orchestrator = GenerationOrchestrator(HistoryStore())
    ss.results = []
    ss.results_for = None
    ss.snapshot_key = secrets.token_bytes(32)
    ss.copied = CopiedIndicator()
    ss.notice = None

    saved = ss.store.read()
    params = saved.params or AdvancedParams()
    if saved.status == "expired":
        ss.notice = "Saved advanced settings expired and were removed."
    elif saved.status == "corrupt":
        ss.notice = "Saved advanced settings were unreadable and were removed."
    ss.version = params.version
    ss.length = params.length
    ss.prefix = params.prefix
    ss.suffix = params.suffix
    ss.raw_mode = params.raw_mode
    ss.platform_text = ""


def _pick_platform(name: str) -> None:
    ss.platform_text = name


def _copy(password: str) -> None:
    if not copy_text(password, ss.copied):
        st.toast("Could not copy to the clipboard.")


def _input_digest(*parts) -> str:
    """Keyed digest of the inputs, so the master key itself is not retained."""
    material = "\x1f".join(map(str, parts)).encode("utf-8")
    return hmac.new(ss.snapshot_key, material, hashlib.sha256).hexdigest()


# ── Header ────────────────────────────────────────────────────────────────

st.markdown(
    f'<h1 style="display:flex;align-items:center;gap:10px">'
    f'{ICON_SHIELD} Reproducible Passwords</h1>',
    unsafe_allow_html=True,
)
st.caption(
    "As long as your inputs stay the same, the result is identical.  \n"
    "Your master key is **never** stored or sent anywhere - "
    "it is only held in memory while generating."
)
if ss.notice:
    st.info(ss.notice)
    ss.notice = None

# ── Inputs ────────────────────────────────────────────────────────────────

master = st.text_input(
    "Master key", type="password", key="master",
    placeholder="Enter master key (min. 8 characters)", autocomplete="off",
)
step = progress_step(master, ss.platform_text)
st.progress(step / 2, text=["Master Key", "Platform", "Advanced"][step])

st.text_input(
    "Platform / service", key="platform_text",
    placeholder="Google, Facebook, or any platform...",
    help="Separate several platforms with spaces.",
)
cols = st.columns(len(config.COMMON_PLATFORMS))
for col, name in zip(cols, config.COMMON_PLATFORMS):
    col.button(name, on_click=_pick_platform, args=(name,))

account_text = st.text_input(
    "Account (optional)", key="account_text",
    placeholder="e.g. alice  -  one per platform when several",
)
if account_count_mismatch(ss.platform_text, account_text):
    st.warning("Number of Accounts must match the number of Platforms.", icon="⚠️")

with st.expander("Advanced settings"):
    c1, c2 = st.columns(2)
    with c1:
        st.number_input("Version", min_value=1, step=1, key="version")
        st.text_input("Prefix", key="prefix")
    with c2:
        st.number_input("Length", min_value=1, max_value=config.MAX_LENGTH, step=1, key="length")
        st.text_input("Suffix", key="suffix")
    st.checkbox("RAW mode (no platform normalization)", key="raw_mode")

    params = AdvancedParams(
        version=int(ss.version), length=int(ss.length),
        prefix=ss.prefix, suffix=ss.suffix, raw_mode=ss.raw_mode,
    )

    s1, s2, s3 = st.columns([2, 1, 1])
    with s1:
        ttl_choice = st.selectbox(
            "Expire after", list(config.TTL_OPTIONS),
            index=list(config.TTL_OPTIONS).index(config.DEFAULT_TTL),
            format_func=config.TTL_LABELS.get,
        )
    with s2:
        if st.button("Save"):
            ss.store.save(params, config.ttl_for(ttl_choice))
            st.toast("Advanced settings saved locally. The master key is never saved.")
    with s3:
        if st.button("Forget"):
            ss.store.clear()
            st.toast("Saved advanced settings removed.")

# Results never outlive the inputs that produced them
snapshot = _input_digest(master, ss.platform_text, account_text, params)
if ss.results_for != snapshot:
    ss.results = []
    ss.results_for = None

# ── Generate ──────────────────────────────────────────────────────────────

if st.button("Generate password", type="primary", disabled=step < 2, key="generate"):
    with st.spinner("Generating…"):
        try:
            ss.results = ss.orchestrator.submit(ss.platform_text, account_text, master, params)
            ss.results_for = snapshot
        except KpwgenError as exc:
            st.error(str(exc))

for i, result in enumerate(ss.results):
    label = result.platform + (f" · {result.account}" if result.account else "")
    head, action = st.columns([4, 1])
    head.markdown(f"**{label}**")
    if ss.copied.is_copied(result.password):
        action.markdown("✓ Copied")
    else:
        action.button("Copy", key=f"copy_{i}", on_click=_copy, args=(result.password,))
    st.code(result.password, language=None)
    report = score_strength(result.password)
    st.markdown(
        f"<span style='color:{STRENGTH_COLORS[report['label']]}'>{report['label']}</span>"
        f" &nbsp;·&nbsp; {report['entropy']} bits of entropy",
        unsafe_allow_html=True,
    )

# ── History ───────────────────────────────────────────────────────────────

history = ss.orchestrator.history
if history:
    st.divider()
    st.markdown(
        f'<p style="display:flex;align-items:center;gap:6px">'
        f'{ICON_HISTORY} <strong>History</strong></p>',
        unsafe_allow_html=True,
    )
    entries = history.all()
    for entry in entries:
        account = f" ({entry.account})" if entry.account else ""
        with st.expander(f"{entry.platform}{account} · {entry.timestamp.astimezone():%H:%M:%S}"):
            st.code(entry.password, language=None)

    e1, e2, e3 = st.columns(3)
    for col, fmt in ((e1, "csv"), (e2, "txt")):
        export = render_export(entries, fmt)
        col.download_button(
            f"Export {fmt.upper()}", data=export.content,
            file_name=export.filename, mime=export.mime_type,
        )
    if e3.button("Clear history"):
        history.clear()
        st.rerun()
