"""
CMMC 2.0 Level 1 framework definition.

Level 1 (Basic Cyber Hygiene) protects Federal Contract Information with
17 practices across 6 domains, each derived from NIST SP 800-171 Rev 2.

Each domain is modeled as one section with a single category holding the
domain's practices; the practice identifier is the control identifier that
assessment responses are keyed by.
"""

from __future__ import annotations

from cmmcready.framework.definitions import (
    Category,
    FrameworkDefinition,
    Question,
    Section,
)

CMMC_LEVEL1_ID = "cmmc-2.0-level1"
CMMC_LEVEL1_NAME = "CMMC 2.0 Level 1 - Basic Cyber Hygiene"
CMMC_LEVEL1_VERSION = "2.0"

# (section id, section name, description, [(practice id, requirement text)])
_DOMAINS: list[tuple[str, str, str, list[tuple[str, str]]]] = [
    (
        "access-control",
        "Access Control (AC)",
        "Limit information system access to authorized users, processes, and devices",
        [
            (
                "ac.l1-3.1.1",
                "Limit system access to authorized users, processes acting on behalf "
                "of authorized users, and devices (including other systems).",
            ),
            (
                "ac.l1-3.1.2",
                "Limit system access to the types of transactions and functions that "
                "authorized users are permitted to execute.",
            ),
            (
                "ac.l1-3.1.3",
                "Control the flow of CUI in accordance with approved authorizations.",
            ),
            (
                "ac.l1-3.1.4",
                "Separate the duties of individuals to reduce the risk of malevolent "
                "activity without collusion.",
            ),
            (
                "ac.l1-3.1.5",
                "Employ the principle of least privilege, including for specific "
                "security functions and privileged accounts.",
            ),
            (
                "ac.l1-3.1.6",
                "Use non-privileged accounts or roles when accessing nonsecurity functions.",
            ),
        ],
    ),
    (
        "identification-authentication",
        "Identification and Authentication (IA)",
        "Identify information system users, processes acting on behalf of users, and devices",
        [
            (
                "ia.l1-3.5.1",
                "Identify information system users, processes acting on behalf of "
                "users, and devices.",
            ),
            (
                "ia.l1-3.5.2",
                "Authenticate (or verify) the identities of users, processes, or "
                "devices before allowing access to organizational information systems.",
            ),
        ],
    ),
    (
        "media-protection",
        "Media Protection (MP)",
        "Protect system media, both paper and digital",
        [
            (
                "mp.l1-3.8.3",
                "Protect (i.e., physically control and securely store, sanitize for "
                "disposal, or destroy) system media containing CUI, both paper and digital.",
            ),
        ],
    ),
    (
        "physical-protection",
        "Physical Protection (PE)",
        "Limit physical access to organizational information systems, equipment, "
        "and operating environments",
        [
            (
                "pe.l1-3.10.1",
                "Limit physical access to organizational information systems, "
                "equipment, and the respective operating environments to authorized "
                "individuals.",
            ),
            ("pe.l1-3.10.2", "Escort visitors and monitor visitor activity."),
        ],
    ),
    (
        "system-communications-protection",
        "System and Communications Protection (SC)",
        "Monitor, control, and protect organizational communications",
        [
            (
                "sc.l1-3.13.1",
                "Monitor, control, and protect organizational communications (i.e., "
                "information transmitted or received by organizational information "
                "systems) at the external boundaries and key internal boundaries of "
                "the information systems.",
            ),
            (
                "sc.l1-3.13.8",
                "Implement subnetworks for publicly accessible system components that "
                "are physically or logically separated from internal networks.",
            ),
        ],
    ),
    (
        "system-information-integrity",
        "System and Information Integrity (SI)",
        "Identify, report, and correct information and information system flaws",
        [
            (
                "si.l1-3.14.1",
                "Identify, report, and correct information and information system "
                "flaws in a timely manner.",
            ),
            ("si.l1-3.14.2", "Protect information at rest."),
            (
                "si.l1-3.14.4",
                "Detect malicious code at organizational information system entry "
                "and exit points.",
            ),
            (
                "si.l1-3.14.5",
                "Monitor organizational information systems to detect attacks and "
                "indicators of attacks.",
            ),
        ],
    ),
]


def _build_cmmc_level1() -> FrameworkDefinition:
    sections = []
    for section_id, name, description, practices in _DOMAINS:
        category = Category(
            id=section_id,
            # Category carries the bare domain name without the abbreviation
            name=name.rsplit(" (", 1)[0],
            questions=tuple(Question(id=pid, text=text) for pid, text in practices),
        )
        sections.append(
            Section(
                id=section_id,
                name=name,
                description=description,
                categories=(category,),
            )
        )

    return FrameworkDefinition(
        id=CMMC_LEVEL1_ID,
        name=CMMC_LEVEL1_NAME,
        version=CMMC_LEVEL1_VERSION,
        sections=tuple(sections),
    )


CMMC_LEVEL1 = _build_cmmc_level1()


def get_cmmc_level1() -> FrameworkDefinition:
    """
    Get the built-in CMMC 2.0 Level 1 framework.

    Returns:
        FrameworkDefinition with 6 domains and 17 practices.
    """
    return CMMC_LEVEL1
