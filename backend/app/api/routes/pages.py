"""
Public page routes: landing page and training sessions
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse

from app.core.auth import SessionIdentity, get_optional_session
from app.core.templates import render_template

router = APIRouter(tags=["pages"])

HIGHLIGHTS = [
    ("Master Basic Commands", 'From "sit" to "stay", build a solid foundation of obedience.'),
    ("Solve Behavior Issues", "Address specific challenges with proven techniques."),
    ("Strengthen Your Bond", "Build trust and understanding through positive training."),
    ("Boost Confidence", "Help your dog become more confident and well-adjusted."),
]

TESTIMONIALS = [
    {
        "quote": "The personalized approach made all the difference. Our Labrador finally walks calmly on the leash.",
        "author": "John Doe",
        "detail": "Dog Owner • Labrador",
    },
    {
        "quote": "They changed not just my dog's behavior, but our relationship.",
        "author": "Jane Smith",
        "detail": "Dog Owner • German Shepherd",
    },
]

TRAINING_SESSIONS = {
    "obedience": {
        "title": "Mastering Basic Obedience: The Foundation of a Well-Behaved Dog",
        "summary": "Master Essential Commands",
        "content": [
            "Welcome to the exciting world of dog obedience training! In this session we cover the "
            "essential commands every dog should know, from the classic 'sit' and 'stay' to more "
            "advanced behaviors.",
            "Our approach combines positive reinforcement with fun, engaging exercises. You'll learn "
            "how to communicate with your dog in a way that builds trust and strengthens your bond.",
            "By the end of the session your dog will have better impulse control and social skills, "
            "and you'll know how to handle common obedience challenges with patience.",
        ],
    },
    "agility": {
        "title": "Agility Training: Unleash Your Dog's Inner Athlete",
        "summary": "Build Speed and Coordination",
        "content": [
            "An action-packed session that turns your dog into a nimble, confident athlete while "
            "strengthening your teamwork. Our agility course suits dogs of all skill levels.",
            "We guide you through the fundamentals, from basic jumps and tunnels to more complex "
            "obstacles, developing coordination, speed and problem-solving.",
            "Agility also sharpens focus. You'll learn to read your dog's body language and "
            "communicate clearly during high-speed runs.",
        ],
    },
    "behavior": {
        "title": "Behavior Modification: Understanding and Transforming Your Dog's Actions",
        "summary": "Address Specific Issues",
        "content": [
            "Understand why your dog acts the way they do and how to guide them toward better "
            "behavior, with insights into canine psychology from our trainers.",
            "We look for the root cause of unwanted behaviors, from separation anxiety to leash "
            "reactivity, and work on practical solutions using positive reinforcement.",
            "You'll leave with a toolkit of strategies for common behavioral challenges and a plan "
            "for an environment that prevents future issues.",
        ],
    },
}


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    identity: Optional[SessionIdentity] = Depends(get_optional_session),
):
    """Landing page"""
    return render_template(
        "index.html",
        {"identity": identity, "highlights": HIGHLIGHTS, "testimonials": TESTIMONIALS},
        request,
    )


@router.get("/events", response_class=HTMLResponse)
async def events_page(
    request: Request,
    identity: Optional[SessionIdentity] = Depends(get_optional_session),
):
    """Training sessions overview"""
    return render_template(
        "events/index.html",
        {"identity": identity, "sessions": TRAINING_SESSIONS},
        request,
    )


@router.get("/events/{slug}", response_class=HTMLResponse)
async def event_detail(
    slug: str,
    request: Request,
    identity: Optional[SessionIdentity] = Depends(get_optional_session),
):
    """Single training session description"""
    session = TRAINING_SESSIONS.get(slug)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Training session '{slug}' not found")
    return render_template(
        "events/detail.html",
        {"identity": identity, "slug": slug, "session": session},
        request,
    )
