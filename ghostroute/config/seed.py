"""
首次启动时写入的第一章事件

字段与导入文件格式一致（event_order / delay / action / actor / static_text /
voice / api_prompt / misc_data），写入默认分区（chapter 为空）
"""

from typing import Any, Dict, List, Optional


def _event(
    order: int,
    delay: int,
    action: str,
    actor: Optional[str] = None,
    text: Optional[str] = None,
    voice: Optional[str] = None,
    prompt: Optional[str] = None,
    misc: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "event_order": order,
        "delay": delay,
        "action": action,
        "actor": actor,
        "static_text": text,
        "voice": voice,
        "api_prompt": prompt,
        "misc_data": misc,
    }


SEED_EVENTS: List[Dict[str, Any]] = [
    _event(1, 1000, "comms", actor="KNOX",
           text="Found something weird. Handhole LFT-UTL-H2037 is warm. Shouldn't be. Logging it now."),
    _event(2, 500, "ledger",
           misc={"time": "14:32", "domain": "INFRA", "desc": "Handhole LFT-UTL-H2037 logged. Anomaly: residual heat."}),
    _event(3, 1000, "comms", actor="KNOX",
           text="I've added a Geo-Intel map and a Social Stream to the OS. Let's see what people are saying."),
    _event(4, 500, "map",
           misc={"lat": 30.133, "lon": -92.033, "popup": "LFT-UTL-H2037: Anomalous thermal reading."}),
    _event(5, 2000, "social",
           prompt="Write a short, realistic social media post from someone in Lafayette, LA complaining "
                  "about their internet being weirdly slow today."),
    _event(6, 3000, "comms", actor="KNOX",
           text="Pulling up Ghost Route. Seeing a pattern... a rhythm. Micro-withdrawals at :15 and :45. "
                "Too clean for humans. I'm opening the Net Traffic analyzer."),
    _event(7, 1000, "map", misc={"event": "startPulse"}),
    _event(8, 500, "ledger",
           misc={"time": "15:03", "domain": "NETWORK",
                 "desc": "Ghost Route overlay active. Rhythm detected: :15/:45 micro-withdrawals."}),
    _event(9, 1000, "netTraffic", misc={"asn": "AS7018", "spike": 90}),
    _event(10, 4000, "comms", actor="KNOX",
           text="Leaving an audio log with my initial thoughts. Check the Audio Logs app."),
    _event(11, 500, "audioLog", voice="Charon",
           text="Say in a slightly concerned, professional tone: Knox, field log. The regularity of these "
                "network events is... unnatural. It feels automated, but not in a way I recognize. The heat "
                "signature at the handhole suggests a physical component, not just software. This isn't a "
                "normal outage. This is something else."),
    _event(12, 6000, "comms", actor="MAYA",
           text="Knox, I got your forward. This \"Operating Agent\" language is a pattern I've seen before. "
                "I need to file a preliminary injunction. Can you redact the sensitive client names from "
                "this draft before I send it?"),
    _event(13, 500, "redaction"),
    _event(14, 8000, "comms", actor="KNOX",
           text="It's not just routing... it's exploiting market microstructure. I've added a Market Shock "
                "Simulator to your dock. See how it concentrates power."),
    _event(15, 500, "simulator"),
    _event(16, 5000, "marketShock"),
    _event(17, 7000, "comms", actor="MAYA",
           text="That market shock was no accident. It correlates with the network events. I need "
                "everything we can find on the shell companies involved. Start with \"Oasis Relay, Ltd.\"."),
    _event(18, 500, "ledger",
           misc={"time": "19:05", "domain": "LEGAL",
                 "desc": "Corporate investigation initiated into \"Oasis Relay, Ltd.\"."}),
    _event(19, 4000, "social",
           prompt="Write a short, realistic social media post from a financial news blogger speculating "
                  "about the cause of a recent, bizarre flash crash in a niche market."),
    _event(20, 6000, "comms", actor="RHEA",
           text="They're getting smarter. The :15/:45 rhythm is gone. They're using a new pattern, "
                "off-prime, looks like :07/:37. More subtle. It's like they know we're watching. "
                "Sending an audio log with the details."),
    _event(21, 500, "audioLog", voice="Leda",
           text="Say in a focused, technical tone: Rhea here. The prime-gap tags are gone. The new pattern "
                "is a phase shift to off-prime times, specifically seven and thirty-seven minutes past the "
                "hour. It's quieter, less obvious. They're not just running a script anymore; they're "
                "adapting. This is active counter-surveillance."),
    _event(22, 7000, "comms", actor="KNOX",
           text="Found a link between Oasis Relay and a new data center build-out in Houston. The power "
                "permits are under a different name, but the fiber contracts lead back to the same trustee. "
                "Adding the location to the Geo-Intel map."),
    _event(23, 500, "map",
           misc={"lat": 29.7174, "lon": -95.3698,
                 "popup": "New Data Center Construction: Linked to Oasis Relay via fiber contracts."}),
    _event(24, 5000, "comms", actor="MAYA",
           text="Good work, team. We have a physical location, a corporate entity, and a clear pattern of "
                "adaptive behavior. We have enough to move. I'm drafting a motion to compel."),
]
