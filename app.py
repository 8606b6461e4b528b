# app.py
import streamlit as st
from auth import login, logout
from database import (init_db, Session, save_submission, load_progress, last_form,
                      leaderboard, join_group, group_leaderboard, User)
from calculator import compute, parse_inputs, InvalidInputError, LifestyleInputs
from progress import BADGES, evaluate_badges, SubmissionStatus
from insights import (eco_rating, goal_progress, personalised_recommendations,
                      recommended_actions, simulate_what_if, WHAT_IF_HABITS, ECO_COLORS)
from analytics import aggregate_history, filter_history, PERIODS, CATEGORIES
from charts import breakdown_bar, breakdown_pie, history_line, eco_gauge
from reports import history_csv, report_text, report_zip
from advisor import location_recommendations, ai_recommendations, ai_summary
from config import settings, setup_logging
from datetime import date

FIELDS = [
    ("car_km", "Car travel (km/month)", 1.0),
    ("bus_km", "Bus travel (km/month)", 1.0),
    ("plane_km", "Plane travel (km/month)", 1.0),
    ("veg_days", "Vegetarian days (per week)", 1.0),
    ("meat_meals", "Meat meals (per month)", 1.0),
    ("clothing_items", "Clothing items bought (per month)", 1),
    ("electronics", "Electronics bought (per year)", 1),
]

# 1. Logging & DB
setup_logging(settings.log_level)
init_db()
st.set_page_config(page_title="Personal Carbon Footprint Tracker", page_icon="🌍")

# 2. Authentication
if not st.session_state.get("logged_in", False):
    login()
    st.stop()

name = st.session_state.get("username", "")
user_id = st.session_state["user_id"]
st.sidebar.write(f"👋 Signed in as {name}")
if st.sidebar.button("Log out"):
    logout()

# 3. Sidebar menu
menu = st.sidebar.radio("Navigate", [
    "Calculator",
    "What If?",
    "Dashboard",
    "Leaderboard",
    "Group",
    "Insights",
    "Download",
])

# 4. DB session & current user
db = Session()
user = db.get(User, user_id)
progress = load_progress(db, user)

# form pre-fill from the last saved submission
if "inputs" not in st.session_state:
    st.session_state.inputs = last_form(db, user_id) or LifestyleInputs()
if "result" not in st.session_state:
    st.session_state.result = None


def render_badges(earned):
    shown = [b for b in BADGES if earned.get(b["id"])]
    if not shown:
        st.caption("No badges earned yet. Meet your goals to unlock achievements!")
        return
    cols = st.columns(len(shown))
    for col, badge in zip(cols, shown):
        with col:
            st.markdown(f"### {badge['icon']}\n**{badge['title']}**")
            st.caption(badge["desc"])


# 5. Handle each menu choice
if menu == "Calculator":
    st.header("Estimate your Monthly Carbon Footprint")
    current = st.session_state.inputs
    with st.form("carbon_form"):
        raw = {}
        for field, label, step in FIELDS:
            default = getattr(current, field)
            if field == "veg_days":
                raw[field] = st.number_input(label, min_value=0.0, max_value=7.0, value=float(default), step=step)
            elif isinstance(step, int):
                raw[field] = st.number_input(label, min_value=0, value=int(default), step=step)
            else:
                raw[field] = st.number_input(label, min_value=0.0, value=float(default), step=step)
        submitted = st.form_submit_button("Calculate & Save")

    if submitted:
        try:
            inputs = parse_inputs(raw)
        except InvalidInputError as e:
            st.warning(f"Please enter valid values for all fields ({e}).")
        else:
            result = compute(inputs)
            st.session_state.inputs = inputs
            st.session_state.result = result
            outcome = save_submission(db, user_id, result, inputs, today=date.today())
            if outcome.status is SubmissionStatus.RECORDED:
                st.success(f"Saved! +10 points. Streak: {outcome.progress.streak} day(s)")
            else:
                st.info("You've already saved today's footprint. Come back tomorrow to grow your streak.")
            for badge in BADGES:
                if badge["id"] in outcome.unlocked:
                    st.balloons()
                    st.success(f"New badge unlocked: {badge['icon']} {badge['title']}")
            progress = outcome.progress

    result = st.session_state.result
    if result is not None:
        inputs = st.session_state.inputs
        st.subheader("Estimated Monthly Carbon Footprint")
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Travel", f"{result.travel:.1f} kg")
        c2.metric("Diet", f"{result.diet:.1f} kg")
        c3.metric("Shopping", f"{result.shopping:.1f} kg")
        c4.metric("Total", f"{result.total:.1f} kg")
        st.plotly_chart(breakdown_bar(result), use_container_width=True)

        rating = eco_rating(result.total)
        st.markdown(f"**Eco Rating:** <span style='color:{ECO_COLORS[rating]};font-weight:bold'>{rating}</span>",
                    unsafe_allow_html=True)
        st.pyplot(eco_gauge(result.total))

        st.subheader("Monthly Goals")
        for category, percent in goal_progress(result).items():
            st.progress(percent / 100, text=f"{category.title()}: {percent}% of goal")

        st.subheader("Achievements")
        render_badges(evaluate_badges(result, progress.badges))

        st.subheader("Personalised Suggestions")
        recs = personalised_recommendations(inputs, result)
        if any(recs.values()):
            for category, items in recs.items():
                if items:
                    st.markdown(f"**{category}**")
                    for rec in items:
                        st.write(f"• {rec}")
        else:
            st.write("Great job! Your habits are already eco-friendly.")

        st.subheader("Recommended Actions")
        for action in recommended_actions():
            st.write(f"- {action}")

elif menu == "What If?":
    st.header("What If? Simulation")
    inputs = st.session_state.inputs
    habit = st.selectbox("Habit to change", list(WHAT_IF_HABITS), format_func=WHAT_IF_HABITS.get)
    value = st.number_input("By how much?", min_value=0.0, value=1.0, step=1.0)
    if st.button("Simulate"):
        try:
            outcome = simulate_what_if(inputs, habit, value)
        except InvalidInputError:
            st.warning("Please enter a valid change.")
        else:
            st.markdown(f"**{outcome.label}:**")
            st.success(f"CO₂ reduction: {outcome.reduction:.1f} kg ({outcome.percent:.1f}%)")
            st.write(f"Projected new total: **{outcome.projected.total:.1f} kg CO₂**")

elif menu == "Dashboard":
    st.header("Your Progress Dashboard")
    col1, col2 = st.columns(2)
    with col1:
        period = st.selectbox("Period", PERIODS)
    with col2:
        category = st.selectbox("Category", CATEGORIES)
    labels, values = aggregate_history(progress.history, period, category)
    if labels:
        st.plotly_chart(history_line(labels, values), use_container_width=True)
    else:
        st.info("No history yet. Save a footprint to start tracking.")
    st.subheader("Badges")
    render_badges(progress.badges)

elif menu == "Leaderboard":
    st.header("Leaderboard")
    for row in leaderboard(db):
        line = f"{row.rank}. {row.name} — {row.points} pts, Streak: {row.streak}"
        st.markdown(f"**{line}**" if row.user_id == user_id else line)

elif menu == "Group":
    st.header("Group / Family")
    group_name = st.text_input("Group or family name", value=user.group_name or "")
    if st.button("Join group"):
        try:
            join_group(db, user_id, group_name)
            st.success(f"Joined group: {group_name.strip()}")
        except InvalidInputError:
            st.warning("Enter a group/family name.")
    group = group_leaderboard(db, user_id)
    if group is None:
        st.info("No group members yet.")
    else:
        gname, rows = group
        st.subheader(gname)
        for row in rows:
            st.write(f"{row.rank}. {row.name} — {row.points} pts, Streak: {row.streak}")

elif menu == "Insights":
    st.header("Insights")
    st.subheader("Local Recommendations")
    col1, col2 = st.columns(2)
    with col1:
        lat = st.number_input("Latitude", min_value=-90.0, max_value=90.0, value=0.0, format="%.4f")
    with col2:
        lon = st.number_input("Longitude", min_value=-180.0, max_value=180.0, value=0.0, format="%.4f")
    if st.button("Get local tips"):
        local = location_recommendations(lat, lon)
        if local["weather"]:
            w = local["weather"]
            st.write(f"**Weather:** {w['weather'][0]['description']}, {w['main']['temp']}°C")
        for rec in local["recommendations"]:
            st.write(f"• {rec}")
        if not local["weather"] and not local["recommendations"]:
            st.write("No local recommendations.")

    if progress.history:
        with st.spinner("Loading summary..."):
            st.subheader("Summary")
            st.write(ai_summary(progress.history))
            st.subheader("Next week")
            st.write(ai_recommendations(progress.history))
    else:
        st.info("Save a footprint to get personalised insights.")

elif menu == "Download":
    st.header("Download Reports")
    col1, col2 = st.columns(2)
    with col1:
        start = st.date_input("From", value=None)
    with col2:
        end = st.date_input("To", value=None)
    entries = filter_history(progress.history, start, end)
    st.download_button("📥 Download CSV", data=history_csv(entries),
                       file_name="footprint_history.csv", mime="text/csv")

    result = st.session_state.result
    recs = []
    if result is not None:
        recs = [r for items in personalised_recommendations(st.session_state.inputs, result).values() for r in items]
    text = report_text(result, progress.badges, recs, start, end)
    figures = {}
    if result is not None:
        figures["breakdown_bar.png"] = breakdown_bar(result)
        figures["breakdown_pie.png"] = breakdown_pie(result)
    labels, values = aggregate_history(entries, "month")
    if labels:
        figures["monthly_trend.png"] = history_line(labels, values, "Monthly average")
    st.download_button("📥 Download Report (ZIP)", data=report_zip(entries, text, figures),
                       file_name="sustainability-report.zip", mime="application/zip")

# 6. Sidebar totals, after any save on this run
st.sidebar.metric("Points", progress.points)
st.sidebar.metric("Streak", progress.streak)

db.close()
