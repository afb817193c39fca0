import sys
import logging
from pathlib import Path

# Add project root to Python Path
ROOT_DIR = Path(__file__).resolve().parent.parent
sys.path.append(str(ROOT_DIR))

import streamlit as st
from dotenv import load_dotenv
from lingshu.config import ENV_FILE
from lingshu.filters import filter_records, listing_frame
from lingshu.models import Category
from lingshu.oracle import ChatSession
from lingshu.quiz import QuizSession
from lingshu.state import AdminState, AppState, VIEWS
from lingshu.store import EntityStore
from lingshu.transcoder import (
    add_effect,
    field_definitions,
    formula_choices,
    formula_options,
    remove_effect,
    update_effect,
)
from lingshu import views

logging.basicConfig(level=logging.INFO)

# Load Env
load_dotenv(dotenv_path=ENV_FILE)

# Page Config
st.set_page_config(page_title="灵枢 · 中医学习助手", layout="wide", page_icon="🌿")

# --- SESSION STATE (reset on reload) ---
if "store" not in st.session_state:
    st.session_state["store"] = EntityStore()
    st.session_state["app"] = AppState()
    st.session_state["admin"] = AdminState()
    st.session_state["quiz"] = QuizSession(st.session_state["store"])
    st.session_state["chat"] = ChatSession()

store: EntityStore = st.session_state["store"]
state: AppState = st.session_state["app"]
admin: AdminState = st.session_state["admin"]

# --- SIDEBAR: NAVIGATION ---
st.sidebar.header("灵枢")
view = st.sidebar.radio(
    "导航",
    VIEWS,
    index=VIEWS.index(state.current_view),
    format_func=lambda v: views.NAV_LABELS[v],
)
if view != state.current_view:
    state.change_view(view)
    st.session_state["search_box"] = ""

st.title(views.title_for(state.current_view))
st.caption(views.subtitle_for(state.current_view))

if state.shows_search:
    state.set_search(st.text_input("搜索数据库...", key="search_box"))


def render_formula(formula_id):
    formula = store.resolve_formula(formula_id)
    if formula is None:
        st.warning(f"方剂 {formula_id} 不存在")
        return
    with st.expander(f"💊 {formula.name} ({formula.pinyin})", expanded=True):
        st.write(f"**分类:** {formula.category}")
        st.write("**组成:** " + "、".join(views.formula_lines(formula)))
        st.write(f"**功用:** {formula.functions}")
        st.write(f"**用法:** {formula.usage}")
        if st.button("关闭", key=f"close-{formula.id}"):
            state.close_formula()
            st.rerun()


def render_results(category):
    hits = filter_records(store.records(category), category, state.search_term)
    if not hits:
        st.info(views.EMPTY_MESSAGES[category])
    return hits


# --- HERBS ---
if state.current_view == "herbs":
    for herb in render_results(Category.HERBS):
        card = views.herb_card(herb)
        with st.container(border=True):
            badge = "🔥" if card["warm"] else "❄️"
            st.subheader(f"{card['name']}  ·  {badge} {card['nature']}")
            st.caption(card["pinyin"])
            st.write(" ".join(card["flavor"]) + "  |  " + " ".join(card["channels"]))
            for idx, effect in enumerate(card["effects"]):
                cols = st.columns([4, 1])
                cols[0].write(f"• {effect['description']}")
                if effect["formula_id"] and cols[1].button("查看方剂", key=f"{herb.id}-{idx}"):
                    state.show_formula(effect["formula_id"])

# --- ACUPOINTS ---
elif state.current_view == "acupoints":
    for point in render_results(Category.ACUPOINTS):
        card = views.acupoint_card(point, store)
        with st.container(border=True):
            st.subheader(f"{card['name']}  `{card['code']}`")
            st.write(f"**定位:** {card['location']}")
            st.write("**主治:** " + "、".join(card["indications"]))
            if card["herbs"]:
                st.write("**配药:** " + ", ".join(card["herbs"]))
            for ref in card["formulas"]:
                if st.button(f"配方: {ref['name']}", key=f"{point.id}-{ref['id']}"):
                    state.show_formula(ref["id"])

# --- FORMULAS ---
elif state.current_view == "formulas":
    for formula in render_results(Category.FORMULAS):
        with st.container(border=True):
            cols = st.columns([3, 2])
            cols[0].subheader(formula.name)
            cols[0].caption(f"{formula.pinyin} • {formula.category}")
            cols[1].write(formula.functions)
            if cols[1].button("详情", key=f"open-{formula.id}"):
                state.show_formula(formula.id)
    if st.button("+ 添加自定义方剂"):
        state.change_view("admin")
        admin.switch_tab(Category.FORMULAS)
        st.rerun()

# --- EXAM POINTS ---
elif state.current_view == "exam":
    hits = render_results(Category.EXAM)
    st.caption(f"共 {len(hits)} 个知识点")
    for kp in hits:
        card = views.knowledge_card(kp)
        with st.expander(f"📖 {card['title']}"):
            st.write(f"`{card['category']}` `{card['difficulty']}`")
            st.write(card["content"])

# --- SKILLS ---
elif state.current_view == "skills":
    for skill in render_results(Category.SKILLS):
        with st.container(border=True):
            st.subheader(skill.title)
            st.caption(skill.category)
            st.write(f"*\"{skill.description}\"*")
            for idx, step in enumerate(skill.steps, start=1):
                st.write(f"{idx}. {step}")

# --- MOCK EXAM ---
elif state.current_view == "quiz":
    session: QuizSession = st.session_state["quiz"]
    cols = st.columns(2)
    if cols[0].button("生成试卷" if not session.has_generated else "重新抽题"):
        session.generate()
    if session.has_generated and cols[1].button("隐藏答案" if session.show_answers else "显示答案"):
        session.toggle_answers()

    for idx, item in enumerate(session.questions, start=1):
        with st.container(border=True):
            st.caption(f"{item.source_category} · {item.sub_label or ''}")
            st.markdown(f"**{idx}. {item.question}**")
            if session.show_answers:
                st.success(item.answer)

# --- AI CHAT ---
elif state.current_view == "ai_chat":
    chat: ChatSession = st.session_state["chat"]
    for msg in chat.messages:
        with st.chat_message("user" if msg["role"] == "user" else "assistant"):
            st.caption(views.chat_role_label(msg["role"]))
            st.markdown(msg["text"])

    prompt = st.chat_input("请输入您的问题...", disabled=chat.loading)
    if prompt:
        with st.spinner("灵枢正在思考..."):
            chat.send(prompt)
        st.rerun()

# --- ADMIN ---
elif state.current_view == "admin":
    tabs = list(views.ADMIN_TABS)
    tab = st.radio(
        "数据类别",
        tabs,
        index=tabs.index(admin.active_tab),
        format_func=lambda c: views.ADMIN_TABS[c],
        horizontal=True,
    )
    if tab != admin.active_tab:
        admin.switch_tab(tab)

    records = store.records(admin.active_tab)
    st.dataframe(listing_frame(records, admin.active_tab), hide_index=True)

    if st.button("新增条目"):
        admin.open_editor()

    for record in records:
        cols = st.columns([4, 1, 1])
        cols[0].write(getattr(record, "name", None) or record.title)
        if cols[1].button("编辑", key=f"edit-{record.id}"):
            admin.open_editor(record)
        if cols[2].button("删除", key=f"del-{record.id}"):
            store.delete(admin.active_tab, record.id)
            st.rerun()

    if admin.is_open:
        st.markdown("### " + ("编辑条目" if admin.editing_id else "新增条目"))
        for field in field_definitions(admin.active_tab):
            key = f"form-{admin.editing_id}-{field.name}"
            current = admin.form.get(field.name, "")
            if field.widget == "textarea":
                admin.update_field(field.name, st.text_area(field.label, current or "", key=key))
            elif field.widget == "select":
                value = current or field.options[0]
                admin.update_field(
                    field.name,
                    st.selectbox(field.label, field.options, index=field.options.index(value), key=key),
                )
            elif field.widget == "effects":
                st.write(f"**{field.label}**")
                options = formula_options(store)
                names = {o["id"]: o["name"] for o in options}
                for idx, effect in enumerate(admin.form.get("effects") or []):
                    cols = st.columns([3, 2, 1])
                    desc = cols[0].text_input(
                        "功效描述", effect.get("description", ""), key=f"{key}-d{idx}",
                        placeholder="功效描述 (例如: 发汗解表)",
                    )
                    admin.form = update_effect(admin.form, idx, "description", desc)
                    linked = effect.get("related_formula_id") or ""
                    choices = formula_choices(store, linked)
                    choice = cols[1].selectbox(
                        "关联方剂", choices, index=choices.index(linked),
                        format_func=lambda i: names.get(i, i) if i else "-- 选择关联方剂 (可选) --",
                        key=f"{key}-f{idx}",
                    )
                    admin.form = update_effect(admin.form, idx, "related_formula_id", choice)
                    if cols[2].button("➖", key=f"{key}-x{idx}"):
                        admin.form = remove_effect(admin.form, idx)
                        st.rerun()
                if st.button("添加功效"):
                    admin.form = add_effect(admin.form)
                    st.rerun()
            else:
                admin.update_field(field.name, st.text_input(field.label, current or "", key=key))

        cols = st.columns(2)
        if cols[0].button("取消"):
            admin.close()
            st.rerun()
        if cols[1].button("保存"):
            admin.save(store)
            st.success("已保存")
            st.rerun()

    st.info("提示: 当前为演示模式，数据存储在本地内存中，刷新页面后会重置。")

# --- FORMULA DETAIL ---
if state.selected_formula_id:
    render_formula(state.selected_formula_id)
