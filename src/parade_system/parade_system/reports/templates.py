"""Starting text offered for a category report, per parade type."""

from __future__ import annotations

from typing import Optional

from ..core.enums import ParadeType

REPORT_TEMPLATES: dict[ParadeType, str] = {
    ParadeType.THEORY: """• Topic covered (Specialised / Common / General Awareness):
• Class / syllabus requirement to complete topic:

• Parade conducted by (ANO / PI Staff / Senior):

• Place of instruction:

• Test conducted (if any) – Average marks / performance:

• Observations / remarks:
""",
    ParadeType.DRILL: """• Type of drill conducted:
• Place and dress code:

• Parade taken by (ANO / PI Staff / Senior):

• Synchronisation and coordination:

• Execution of commands:

• Areas requiring improvement:

• Overall assessment:
""",
    ParadeType.WEAPON_TRAINING: """• Place and dress code:
• Parade taken by (ANO / PI Staff / Senior):

• Weapon handling and posture:

• Cadet discipline during training:

• Observed mistakes / safety concerns:

• Remarks:
""",
    ParadeType.PHYSICAL_TRAINING: """• Type of PT activities conducted:
• Activity and duration:

• Cadet participation and turnout:

• Physical endurance level observed:

• Injuries / health issues (if any):

• Overall performance:

• Remarks:
""",
    ParadeType.PARADE_REHEARSAL: """• Purpose of rehearsal:
• Strength present:

• Presence of ANO / PI Staff / Senior:

• Dress code:

• Coordination between contingents:

• Drill accuracy and alignment:

• Readiness level:

• Observations / remarks:
""",
    ParadeType.CULTURAL_PRACTICE: """• Event / programme being practised (with date):
• Type of performance (song / dance / skit etc.):

• Status (completed / ongoing) and count of items:

• Time required to complete preparation:

• Remarks:
""",
    ParadeType.EVENT: """• Event name:
• Guests attended:

• Place and duration of event:

• Cadet discipline and conduct:

• Refreshments served (if any - filled by C category):

• Interaction with guests / public exposure:

• Outcome / impact of the event:

• Remarks:
""",
    ParadeType.AWARENESS_PROGRAM: """• Topic / theme of awareness:
• Guests attended / involved:

• Mode of delivery (talk / rally / demonstration):

• Public response (if any):

• Learning outcome for cadets:

• Remarks:
""",
}


def template_for(parade_type: Optional[ParadeType]) -> str:
    if parade_type is None:
        return ""
    return REPORT_TEMPLATES.get(parade_type, "")
