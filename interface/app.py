# interface/app.py
"""
Packing Note Filler - Main Application

Streamlit interface: upload a packing template and photos of the handwritten
packing notes, then download the template with box units and box dimensions
filled in.
"""

from typing import List

import pandas as pd
import streamlit as st

from config import (
    DEFAULT_MODEL,
    MAX_NOTE_IMAGES,
    SUPPORTED_IMAGE_EXTENSIONS,
    SUPPORTED_TEMPLATE_EXTENSIONS,
    setup_logging,
)
from domain.manifest import Manifest
from input_readers.image import NoteImage
from interface.processor import process_uploads

setup_logging()


def _products_frame(manifest: Manifest) -> pd.DataFrame:
    """Extracted products as a table, one column per box number."""
    box_numbers = sorted({n for p in manifest.products for n in p.boxes})
    rows = []
    for p in manifest.products:
        row = {
            "ASIN": p.asin,
            "FNSKU": p.fnsku,
            "QTY": p.quantity,
            "Handwritten Note": p.handwritten_note,
        }
        for n in box_numbers:
            row[f"Box {n}"] = p.boxes.get(n)
        rows.append(row)

    df = pd.DataFrame(rows)
    for c in ["QTY", *[f"Box {n}" for n in box_numbers]]:
        if c in df.columns:
            df[c] = pd.to_numeric(df[c], errors="coerce").astype("Float64")
    return df


def _dimensions_frame(manifest: Manifest) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Box Number": d.box_number,
                "Weight": d.weight,
                "Length": d.length,
                "Width": d.width,
                "Height": d.height,
            }
            for d in manifest.box_dimensions
        ]
    )


# ============================================================================
# PAGE CONFIG
# ============================================================================
st.set_page_config(
    page_title="Packing Note Filler",
    page_icon="📦",
    layout="wide",
    initial_sidebar_state="collapsed",
)

# ============================================================================
# SESSION STATE INITIALIZATION
# ============================================================================
if "result" not in st.session_state:
    st.session_state.result = None

# ============================================================================
# MAIN APP FLOW
# ============================================================================
st.title("📦 Packing Note Filler")
st.caption("Fill box units and box dimensions in a packing template from photos of handwritten notes.")

col1, col2 = st.columns(2)
with col1:
    template_file = st.file_uploader(
        "📁 Packing template",
        type=[ext.lstrip(".") for ext in SUPPORTED_TEMPLATE_EXTENSIONS],
        key="template_upload",
    )
with col2:
    image_files = st.file_uploader(
        f"📷 Packing note photos (up to {MAX_NOTE_IMAGES})",
        type=[ext.lstrip(".") for ext in SUPPORTED_IMAGE_EXTENSIONS],
        accept_multiple_files=True,
        key="image_upload",
    )

model = st.text_input("Vision model", value=DEFAULT_MODEL)

if template_file and image_files:
    if st.button("🚀 Process", type="primary", width="stretch"):
        images: List[NoteImage] = [NoteImage(filename=f.name, data=f.getvalue()) for f in image_files]
        with st.spinner("🔄 Reading notes and filling the template..."):
            st.session_state.result = process_uploads(
                template_data=template_file.getvalue(),
                template_name=template_file.name,
                images=images,
                model=model,
            )

# ============================================================================
# RESULTS SECTION
# ============================================================================
result = st.session_state.result
if result is not None:
    if result.success:
        report = result.report
        st.success(
            f"✅ Filled {report.unit_cells_written} box unit cell(s) across {report.matched_rows} row(s) "
            f"and {report.dimension_cells_written} dimension cell(s)."
        )
        if report.header_row is None:
            st.warning("No header row with SKU and ASIN found; box units were not filled.")
        if report.box_name_row is None:
            st.warning("No 'Box name' row found; box dimensions were not filled.")
        if report.unmatched_rows:
            st.info(f"{report.unmatched_rows} template row(s) had no matching ASIN in the notes.")
        if report.unused_box_dimensions:
            st.info(f"{report.unused_box_dimensions} box dimension(s) had no box column to go in.")

        st.download_button(
            label="📥 Download Filled Template",
            data=result.output_bytes,
            file_name=result.output_filename,
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            type="primary",
            width="stretch",
            key="download_filled",
        )
    else:
        st.error(f"❌ Error: {result.error}")

    manifest = result.manifest
    if manifest is not None:
        if manifest.products:
            st.subheader("Extracted products")
            st.dataframe(_products_frame(manifest), hide_index=True)
        if manifest.box_dimensions:
            st.subheader("Box dimensions")
            st.dataframe(_dimensions_frame(manifest), hide_index=True)
        with st.expander("Raw model output"):
            st.code(manifest.raw_text or "(empty)", language="json")

    if st.button("🔄 Start Over"):
        for key in list(st.session_state.keys()):
            del st.session_state[key]
        st.rerun()
