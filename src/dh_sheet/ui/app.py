"""Daggerheart Digital Sheet - Streamlit entry point.

Renders the working sheet as an editable form. Every widget hands its
new value to the SheetSession, which clamps, logs and persists it.

Run with:
    streamlit run src/dh_sheet/ui/app.py
"""

from __future__ import annotations

import streamlit as st

from dh_sheet.core.config import get_settings
from dh_sheet.core.exceptions import SheetImportError, StorageError
from dh_sheet.core.logging import configure_from_settings, get_logger
from dh_sheet.engine import editing
from dh_sheet.engine.session import SheetSession
from dh_sheet.models.sheet import Trait


logger = get_logger(__name__)


# =============================================================================
# Session
# =============================================================================


def get_session() -> SheetSession:
    """Return the session stored in Streamlit state, opening it once."""
    if "sheet_session" not in st.session_state:
        settings = get_settings()
        configure_from_settings(settings)
        try:
            session = SheetSession.from_settings(settings)
            session.open()
        except StorageError as exc:
            logger.error("Sheet store unavailable", error=exc.message, details=exc.details)
            st.error(f"Sheet storage is unavailable: {exc.message}")
            st.stop()
        st.session_state.sheet_session = session
    return st.session_state.sheet_session


def _key(session: SheetSession, name: str) -> str:
    # Widget state is tied to the document id so imports and resets
    # render fresh widgets.
    return f"{name}_{session.document.id}"


def number(session: SheetSession, label: str, value: int, low: int, high: int, edit, *args) -> None:
    """Render a number input and apply ``edit`` when the value changes."""
    new_value = st.number_input(
        label,
        min_value=low,
        max_value=high,
        value=editing.clamp(value, low, high),
        step=1,
        key=_key(session, label),
    )
    if int(new_value) != value:
        session.update(edit, *args, int(new_value))


def text(session: SheetSession, label: str, value: str, edit, *args, area: bool = False) -> None:
    widget = st.text_area if area else st.text_input
    new_value = widget(label, value=value, key=_key(session, label))
    if new_value != value:
        session.update(edit, *args, new_value)


def track(session: SheetSession, label: str, current: int, maximum: int, edit) -> None:
    """Render a resource track as a row of boxes."""
    st.caption(f"{label} {current}/{maximum}")
    columns = st.columns(max(maximum, 1))
    for index, column in enumerate(columns[:maximum]):
        filled = index < current
        if column.button("■" if filled else "□", key=_key(session, f"{label}_box_{index}")):
            session.update(edit, editing.track_click(current, index))
            st.rerun()


# =============================================================================
# Sections
# =============================================================================


def render_top_bar(session: SheetSession) -> None:
    doc = session.document
    keys = list(session.library)
    cols = st.columns(6)
    with cols[0]:
        index = keys.index(doc.class_key) if doc.class_key in keys else 0
        choice = st.selectbox("Class", keys, index=index, key=_key(session, "class"))
        if choice != doc.class_key:
            session.switch_class(choice)
            st.rerun()
    for column, field in zip(cols[1:5], editing.META_TEXT_FIELDS):
        with column:
            text(session, field.capitalize(), getattr(doc.meta, field), editing.set_meta, field)
    with cols[5]:
        number(session, "Level", doc.meta.level, *editing.LEVEL_RANGE, editing.set_meta, "level")

    export_col, import_col, reset_col = st.columns(3)
    filename, payload = session.export()
    export_col.download_button("Export", data=payload, file_name=filename, mime="application/json")

    upload = import_col.file_uploader("Import", type=["json"], key=_key(session, "import"))
    if upload is not None and st.session_state.get("last_import") != upload.file_id:
        st.session_state.last_import = upload.file_id
        try:
            session.import_bytes(upload.getvalue())
        except SheetImportError as exc:
            logger.warning("Import rejected", filename=upload.name, error=exc.message)
            st.error(f"Invalid sheet file: {exc.message}")
        else:
            st.rerun()

    if reset_col.button("Reset"):
        session.reset()
        st.rerun()


def render_traits(session: SheetSession) -> None:
    doc = session.document
    st.subheader("Traits")
    advantage = st.checkbox("Advantage", key="roll_advantage")
    disadvantage = st.checkbox("Disadvantage", key="roll_disadvantage")
    for trait in Trait:
        value_col, roll_col = st.columns([3, 1])
        with value_col:
            number(session, trait.label, doc.traits.get(trait), *editing.TRAIT_RANGE, editing.set_trait, trait)
        if roll_col.button("Roll", key=f"roll_{trait.value}"):
            session.roll_trait(trait, advantage=advantage, disadvantage=disadvantage)
            st.rerun()


def render_defense(session: SheetSession) -> None:
    doc = session.document
    st.subheader("Defense")
    number(session, "Evasion (base)", doc.evasion, *editing.EVASION_RANGE, editing.set_evasion)
    number(session, "Armor", doc.armor, *editing.ARMOR_RANGE, editing.set_armor)
    for which in editing.THRESHOLDS:
        value = getattr(doc.damage_thresholds, which)
        number(session, f"{which.capitalize()} Threshold", value, *editing.THRESHOLD_RANGE,
               editing.set_threshold, which)


def render_vitals(session: SheetSession) -> None:
    doc = session.document
    st.subheader("Vitals")
    track(session, "HP", doc.hp.current, doc.hp.max, editing.set_hp_current)
    number(session, "HP Max", doc.hp.max, *editing.TRACK_MAX_RANGE, editing.set_hp_max)
    track(session, "Stress", doc.stress.current, doc.stress.max, editing.set_stress_current)
    number(session, "Stress Max", doc.stress.max, *editing.TRACK_MAX_RANGE, editing.set_stress_max)
    number(session, "Hope", doc.hope, *editing.HOPE_RANGE, editing.set_hope)
    number(session, "Experience Points", doc.experience_points, *editing.EXPERIENCE_POINTS_RANGE,
           editing.set_experience_points)


def render_experiences(session: SheetSession) -> None:
    st.subheader("Experiences")
    for exp in session.document.experiences:
        text_col, bonus_col, active_col, remove_col = st.columns([4, 1, 1, 1])
        with text_col:
            new_text = st.text_input("Experience", value=exp.text, key=_key(session, f"exp_text_{exp.id}"))
        with bonus_col:
            new_bonus = st.number_input("Bonus", 0, 10, value=exp.bonus, key=_key(session, f"exp_bonus_{exp.id}"))
        with active_col:
            new_active = st.checkbox("Active", value=exp.active, key=_key(session, f"exp_active_{exp.id}"))
        if (new_text, int(new_bonus), new_active) != (exp.text, exp.bonus, exp.active):
            session.update(
                editing.update_experience, exp.id,
                text=new_text, bonus=int(new_bonus), active=new_active,
            )
        if remove_col.button("Remove", key=_key(session, f"exp_remove_{exp.id}")):
            session.update(editing.remove_experience, exp.id)
            st.rerun()
    if st.button("Add experience"):
        session.update(editing.add_experience)
        st.rerun()


def render_class_actions(session: SheetSession) -> None:
    doc = session.document
    definition = session.class_definition
    st.subheader(f"Class Actions - {doc.class_key}")
    st.caption(f"Evasion: {session.effective_evasion}")
    if definition is None:
        st.info("This class is not in the library.")
    else:
        columns = st.columns(len(definition.actions) + 1)
        for column, action in zip(columns, definition.actions):
            if column.button(action.label, key=f"action_{action.id}"):
                session.run_action(action.id)
                st.rerun()
        if columns[-1].button("Clear Buffs"):
            session.clear_buffs()
            st.rerun()

    pending = session.pending_prompt
    if pending is not None:
        with st.form("prompt_form"):
            answer = st.text_input(pending.message)
            submitted, cancelled = st.columns(2)
            if submitted.form_submit_button("OK"):
                session.answer_prompt(answer)
                st.rerun()
            if cancelled.form_submit_button("Cancel"):
                session.answer_prompt(None)
                st.rerun()

    st.caption("Recent")
    if doc.activity_log:
        for line in doc.activity_log:
            st.markdown(f"- {line}")
    else:
        st.caption("No actions yet.")


def render_equipment(session: SheetSession) -> None:
    doc = session.document
    for slot in editing.WEAPON_SLOTS:
        weapon = getattr(doc.weapons, slot)
        with st.expander(f"{slot.capitalize()} Weapon"):
            for field in ("name", "trait", "range", "damage", "feature"):
                new_value = st.text_input(field.capitalize(), value=getattr(weapon, field),
                                          key=_key(session, f"{slot}_{field}"))
                if new_value != getattr(weapon, field):
                    session.update(editing.set_weapon, slot, **{field: new_value})
    with st.expander("Armor"):
        for field in ("name", "thresholds", "base", "feature"):
            new_value = st.text_input(field.capitalize(), value=getattr(doc.armor_block, field),
                                      key=_key(session, f"armor_{field}"))
            if new_value != getattr(doc.armor_block, field):
                session.update(editing.set_armor_block, **{field: new_value})


def render_status(session: SheetSession) -> None:
    doc = session.document
    inventory_col, notes_col, status_col = st.columns(3)
    with inventory_col:
        text(session, "Inventory", doc.inventory, editing.set_inventory, area=True)
    with notes_col:
        text(session, "Notes", doc.notes, editing.set_notes, area=True)
    with status_col:
        st.caption("Status")
        if doc.buffs:
            st.write(", ".join(f"{key}: {value}" for key, value in doc.buffs.items()))
        else:
            st.caption("No buffs")
        definition = session.class_definition
        if definition is not None:
            st.write(f"Class start Evasion: {definition.start_evasion}")


# =============================================================================
# Main Page
# =============================================================================


def main() -> None:
    """Render the sheet page."""
    settings = get_settings()
    st.set_page_config(page_title=settings.app_name, layout="wide")
    st.title(settings.app_name)
    st.caption(f"v{settings.app_version}")

    session = get_session()
    render_top_bar(session)

    traits_col, defense_col, vitals_col = st.columns(3)
    with traits_col:
        render_traits(session)
    with defense_col:
        render_defense(session)
    with vitals_col:
        render_vitals(session)

    render_class_actions(session)
    render_experiences(session)
    render_equipment(session)
    render_status(session)


if __name__ == "__main__":
    main()
