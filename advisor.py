# advisor.py
"""Weather and AI advice. Every lookup falls back to fixed text on failure."""
import json
import logging

import openai
import requests

from config import settings

logger = logging.getLogger(__name__)

WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
LOCATION_FAILURE = "Could not fetch local recommendations."
FALLBACK_RECOMMENDATIONS = ("Try to reduce car travel, eat more vegetarian meals, "
                            "and buy fewer new items next week!")
FALLBACK_SUMMARY = ("Your carbon footprint is steady. Keep up the good work and try to "
                    "improve your travel and diet habits!")
COACH_PROMPT = "You are a sustainability coach."


def fetch_weather(lat, lon, api_key, timeout=10):
    resp = requests.get(
        WEATHER_URL,
        params={"lat": lat, "lon": lon, "appid": api_key, "units": "metric"},
        timeout=timeout,
    )
    resp.raise_for_status()
    return resp.json()


def weather_tips(weather):
    tips = []
    main = (weather.get("weather") or [{}])[0].get("main")
    temp = (weather.get("main") or {}).get("temp")
    if temp is not None and temp > 15 and main != "Rain":
        tips.append("It's a great day for walking or cycling!")
    elif main == "Rain":
        tips.append("Consider public transport or carpooling due to rainy weather.")
    return tips


def location_recommendations(lat, lon, cfg=settings):
    weather, recs = None, []
    if not (cfg.openweather_api_key and lat is not None and lon is not None):
        return {"weather": weather, "recommendations": recs}
    try:
        weather = fetch_weather(lat, lon, cfg.openweather_api_key, cfg.request_timeout)
        recs.extend(weather_tips(weather))
    except (requests.RequestException, ValueError) as e:
        logger.warning("Weather lookup failed for (%s, %s): %s", lat, lon, e)
        weather = None
        recs.append(LOCATION_FAILURE)
    return {"weather": weather, "recommendations": recs}


def history_payload(history):
    return json.dumps([
        {"date": e.date.isoformat(), "total": round(e.total, 2),
         "breakdown": {k: round(v, 2) for k, v in e.breakdown.items()}}
        for e in history
    ])


def _chat(system, user, cfg):
    client = openai.OpenAI(api_key=cfg.openai_api_key, timeout=cfg.request_timeout)
    response = client.chat.completions.create(
        model=cfg.openai_model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
    )
    return response.choices[0].message.content


def _ask_coach(system, user, fallback, cfg):
    if not cfg.openai_api_key:
        return fallback
    try:
        text = _chat(system, user, cfg)
    except openai.OpenAIError as e:
        logger.warning("AI request failed, using fallback text: %s", e)
        return fallback
    return text or fallback


def ai_recommendations(history, cfg=settings):
    return _ask_coach(
        f"{COACH_PROMPT} Give actionable, positive, and specific advice for reducing "
        "carbon footprint based on the user's data and trends.",
        f"Here is my recent carbon footprint data: {history_payload(history)}. "
        "What are the top 3 things I should focus on next week?",
        FALLBACK_RECOMMENDATIONS,
        cfg,
    )


def ai_summary(history, cfg=settings):
    return _ask_coach(
        f"{COACH_PROMPT} Write a short, friendly summary of the user's carbon "
        "footprint trends over time.",
        f"Here is my carbon footprint history: {history_payload(history)}. "
        "Summarise my progress and trends.",
        FALLBACK_SUMMARY,
        cfg,
    )
