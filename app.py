from typing import Any, Dict, List, cast

import streamlit as st

from src.bom_merge import (
    BomEntry,
    DiagnosticKind,
    PipelineConfig,
    aggregate_parts,
    process_input_data,
    total_quantity,
)
from src.exporters import generate_bom_csv

st.set_page_config(page_title="Pedal BOM Merger", page_icon="🎸")

st.title("🎸 Pedal BOM Merger")
st.markdown("""
**Merge your build documents into one shopping list.**

Upload the PDF build docs (or CSV exports) of every pedal you plan to build.
This tool detects the layout of each document, cleans up the values (`4K7` → `4.7K`,
`100nF` → `100n`) and merges identical parts into a single quantified list.
""")

if "bom" not in st.session_state:
    st.session_state.bom = None
if "stats" not in st.session_state:
    st.session_state.stats = None
if "diagnostics" not in st.session_state:
    st.session_state.diagnostics = []

st.divider()
st.subheader("1. Documents")

uploads = st.file_uploader(
    "Upload build documents",
    type=["pdf", "csv"],
    accept_multiple_files=True,
)
urls = st.text_area(
    "Or paste document URLs (one per line)",
    height=80,
    placeholder="https://example.com/build-doc.pdf",
)

st.divider()

if st.button("Generate Master List", type="primary", use_container_width=True):
    diagnostics: List[Dict[str, Any]] = []
    config = PipelineConfig(on_diagnostic=diagnostics.append)
    all_parts = []
    stats: Dict[str, Any] = {"documents": 0, "rows_read": 0, "parts_found": 0}

    sources = [("Upload File", f, f.name) for f in uploads or []]
    sources += [
        ("From URL", url.strip(), url.strip())
        for url in urls.splitlines()
        if url.strip()
    ]

    for method, data, name in sources:
        parts, doc_stats, _ = process_input_data(method, data, name, config)
        all_parts.extend(parts)
        stats["documents"] += 1
        stats["rows_read"] += doc_stats["rows_read"]
        stats["parts_found"] += doc_stats["parts_found"]

    st.session_state.bom = aggregate_parts(all_parts)
    st.session_state.stats = stats
    st.session_state.diagnostics = diagnostics
    st.toast("Generated Master List!", icon="🎸")

# Main Process
if st.session_state.bom:
    bom = cast(List[BomEntry], st.session_state.bom)
    stats = cast(Dict[str, Any], st.session_state.stats)
    diagnostics = st.session_state.diagnostics

    # 1. Show Stats
    with st.container():
        c1, c2, c3 = st.columns(3)
        c1.metric("Documents", stats["documents"])
        c2.metric("Parts Found", total_quantity(bom))
        c3.metric("Unique Items", len(bom))

    st.divider()

    # 2. Report problems
    failures = [d for d in diagnostics if d["kind"] is DiagnosticKind.SOURCE_FAILURE]
    misses = [d for d in diagnostics if d["kind"] is DiagnosticKind.CLASSIFICATION_MISS]
    guesses = [d for d in diagnostics if d["kind"] is DiagnosticKind.LOW_CONFIDENCE]

    for d in failures:
        st.error(f"❌ {d['reason']}")
    if misses or guesses:
        st.warning(
            f"⚠️ Skipped {len(misses)} rows and guessed {len(guesses)} values:"
        )
        with st.expander("Show ignored lines"):
            for d in misses + guesses:
                st.code(f"[{d['source']}] {d['reason']}: {' | '.join(d['row'])}")
    elif not failures:
        st.success("✅ Clean parse. No weird leftovers.")

    # 3. Render
    st.subheader("🛒 Master List")
    st.dataframe(
        [
            {"Type": str(e["type"]), "Value": e["value"], "Qty": e["quantity"]}
            for e in bom
        ],
        use_container_width=True,
    )

    # 4. Downloads
    st.subheader("💾 Export")
    st.download_button(
        "Download CSV",
        data=generate_bom_csv(bom),
        file_name="merged_bom.csv",
        mime="text/csv",
        type="primary",
    )
