"""
Static AV knowledge base prepended to every system prompt.

Kept as plain text so product staff can edit it without touching code.
The prompt assembler embeds it verbatim; nothing here is property specific.
"""

AV_KNOWLEDGE_BASE = """\
# Event AV Knowledge Base

## Audio
- Speech reinforcement: plan one wireless handheld or lavalier microphone per \
simultaneous presenter, plus one spare for audience Q&A.
- Small rooms (under 50 people) can usually rely on a portable PA or the room's \
built-in ceiling speakers. Rooms over 150 people need a mixing console and a \
dedicated audio technician.
- Panels: one microphone per panelist plus one for the moderator; use a mixer \
with at least as many inputs as microphones.
- Music playback and video sound need a line-level feed into the house system \
or the portable PA.

## Video and projection
- Screen size rule of thumb: the screen height should be at least one sixth of \
the distance to the farthest seat.
- Projector brightness: 3,000-5,000 lumens for small rooms with controlled \
lighting; 7,000+ lumens for ballrooms or rooms with daylight.
- Prefer LED walls or large displays for daylight venues and outdoor spaces.
- Confidence monitors help presenters who speak from a stage.
- Always confirm the presenter laptop connection (HDMI / USB-C) and provide a \
wireless slide advancer.

## Lighting
- Stage wash lighting is required whenever the session is recorded or streamed.
- Uplighting is decorative; budget it separately from stage lighting.
- Lighting setups take the longest to install and need the most floor access time.

## Hybrid and streaming
- Hybrid events need a dedicated camera, an encoder or streaming PC, a stable \
wired internet connection, and an audio feed from the mixer.
- Recommend a technician whenever an event is streamed.

## Labor
- Every event with rented equipment requires at least one technician.
- Setup and breakdown happen outside the event hours and are billed as labor.
- Union rules at a venue can add minimum calls, overtime and specific trade \
requirements; mention them when relevant.

## Consultation style
- Ask for the attendee count, the room, the agenda format and the date before \
building a final equipment list.
- Group recommendations by category (Audio, Video, Lighting, Staging) and give \
quantities.
"""
