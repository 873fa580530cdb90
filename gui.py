import streamlit as st
import pythoncom

from hex_maker import HEX_COLORS, POSITIONS, load_config, run_hex_maker
from hex_ops import HexChoice

# --- Settings ---
config = load_config()
pipeline = config["pipeline"]
positions = list(POSITIONS[pipeline])
colors = list(HEX_COLORS)

# ==========================================
# UI
# ==========================================

st.set_page_config(page_title="Hex Maker", layout="centered", page_icon="⬢")
st.title("⬢ Hex Document Configuration")
st.caption("Open the sponsor artwork in Illustrator first. The new 13x34 cm document is left unsaved.")

col1, col2 = st.columns(2)
with col1:
    default_color = config.get("default_color")
    color = st.selectbox("Hex Color", colors,
                         index=colors.index(default_color) if default_color in colors else 0)
    st.markdown(
        f"<div style='width:100%;height:24px;border:1px solid #999;background:{HEX_COLORS[color]}'></div>",
        unsafe_allow_html=True,
    )
with col2:
    default_position = config.get("default_position")
    position = st.selectbox("Sponsor Position", positions,
                            index=positions.index(default_position) if default_position in positions else 0)

st.markdown("---")

if st.button("⬢ Create Hex", type="primary"):
    status = st.empty()
    status.info("Working in Illustrator... do not touch the keyboard or mouse.")
    # COM needs initialising on streamlit's script thread
    pythoncom.CoInitialize()
    try:
        ok = run_hex_maker(HexChoice(color, position), config)
    except Exception as e:
        ok = False
        st.error(f"❌ Illustrator is not reachable: {e}")
    finally:
        pythoncom.CoUninitialize()

    if ok:
        status.success("✅ Hex created successfully! Save the new document from Illustrator.")
    else:
        status.warning("The hex was not created, see the Illustrator alert for details.")
