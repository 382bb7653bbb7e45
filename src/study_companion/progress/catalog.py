# src/study_companion/progress/catalog.py

"""
Built-in Class 10 CBSE syllabus used to seed the progress store.

The catalog is immutable data (tuples). seed_subjects() builds fresh, all-incomplete
Subject objects on every call, so callers can mutate completion flags freely.
"""

from __future__ import annotations

from .models import Chapter, Subject

# (id, name, icon, color, ((chapter_id, chapter_name), ...))
SYLLABUS: tuple[tuple[str, str, str, str, tuple[tuple[str, str], ...]], ...] = (
    (
        "mathematics",
        "Mathematics",
        "📐",
        "from-blue-400 to-indigo-600",
        (
            ("real-numbers", "Real Numbers"),
            ("polynomials", "Polynomials"),
            ("linear-equations", "Pair of Linear Equations in Two Variables"),
            ("quadratic-equations", "Quadratic Equations"),
            ("arithmetic-progressions", "Arithmetic Progressions"),
            ("triangles", "Triangles"),
            ("coordinate-geometry", "Coordinate Geometry"),
            ("trigonometry", "Introduction to Trigonometry"),
            ("heights-distances", "Some Applications of Trigonometry"),
            ("circles", "Circles"),
            ("areas-volumes", "Areas Related to Circles"),
            ("surface-areas", "Surface Areas and Volumes"),
            ("statistics", "Statistics"),
            ("probability", "Probability"),
        ),
    ),
    (
        "science",
        "Science",
        "🔬",
        "from-green-400 to-emerald-600",
        (
            # Physics
            ("light-reflection", "Light - Reflection and Refraction"),
            ("human-eye", "The Human Eye and Colourful World"),
            ("electricity", "Electricity"),
            ("magnetic-effects", "Magnetic Effects of Electric Current"),
            # Chemistry
            ("acids-bases", "Acids, Bases and Salts"),
            ("metals-nonmetals", "Metals and Non-metals"),
            ("carbon-compounds", "Carbon and its Compounds"),
            ("chemical-reactions", "Chemical Reactions and Equations"),
            # Biology
            ("life-processes", "Life Processes"),
            ("control-coordination", "Control and Coordination"),
            ("reproduction", "How do Organisms Reproduce?"),
            ("heredity-evolution", "Heredity and Evolution"),
            ("natural-resources", "Our Environment"),
        ),
    ),
    (
        "english-first-flight",
        "English - First Flight",
        "📚",
        "from-purple-400 to-pink-600",
        (
            # Prose
            ("letter-to-god", "A Letter to God"),
            ("nelson-mandela", "Nelson Mandela: Long Walk to Freedom"),
            ("two-stories-flying", "Two Stories about Flying"),
            ("diary-anne-frank", "From the Diary of Anne Frank"),
            ("hundred-dresses-i", "The Hundred Dresses - I"),
            ("hundred-dresses-ii", "The Hundred Dresses - II"),
            ("glimpses-india", "Glimpses of India"),
            ("mijbil-otter", "Mijbil the Otter"),
            ("madam-rides-bus", "Madam Rides the Bus"),
            ("sermon-benares", "The Sermon at Benares"),
            ("proposal", "The Proposal"),
            # Poetry
            ("dust-snow", "Dust of Snow"),
            ("fire-ice", "Fire and Ice"),
            ("tiger-zoo", "A Tiger in the Zoo"),
            ("how-tell-wild-animals", "How to Tell Wild Animals"),
            ("ball-poem", "The Ball Poem"),
            ("amanda", "Amanda!"),
            ("animals", "Animals"),
            ("trees", "The Trees"),
            ("fog", "Fog"),
            ("tale-custard-dragon", "The Tale of Custard the Dragon"),
            ("for-anne-gregory", "For Anne Gregory"),
        ),
    ),
    (
        "english-footprints",
        "English - Footprints without Feet",
        "👣",
        "from-indigo-400 to-purple-600",
        (
            ("triumph-surgery", "A Triumph of Surgery"),
            ("thief-story", "The Thief's Story"),
            ("midnight-visitor", "The Midnight Visitor"),
            ("question-trust", "A Question of Trust"),
            ("footprints-without-feet", "Footprints without Feet"),
            ("making-scientist", "The Making of a Scientist"),
            ("necklace", "The Necklace"),
            ("hack-driver", "The Hack Driver"),
            ("bholi", "Bholi"),
            ("book-saved-earth", "The Book That Saved the Earth"),
        ),
    ),
    (
        "social-science",
        "Social Science",
        "🌍",
        "from-orange-400 to-red-600",
        (
            # History
            ("nationalism-europe", "The Rise of Nationalism in Europe"),
            ("nationalism-india", "Nationalism in India"),
            ("making-global-world", "The Making of a Global World"),
            ("age-industrialisation", "The Age of Industrialisation"),
            ("print-culture", "Print Culture and the Modern World"),
            # Geography
            ("resources-development", "Resources and Development"),
            ("forest-wildlife", "Forest and Wildlife Resources"),
            ("water-resources", "Water Resources"),
            ("agriculture", "Agriculture"),
            ("minerals-energy", "Minerals and Energy Resources"),
            ("manufacturing", "Manufacturing Industries"),
            ("lifelines-national-economy", "Lifelines of National Economy"),
            # Political Science
            ("power-sharing", "Power Sharing"),
            ("federalism", "Federalism"),
            ("democracy-diversity", "Democracy and Diversity"),
            ("gender-religion-caste", "Gender, Religion and Caste"),
            ("popular-struggles", "Popular Struggles and Movements"),
            ("political-parties", "Political Parties"),
            ("outcomes-democracy", "Outcomes of Democracy"),
            ("challenges-democracy", "Challenges to Democracy"),
            # Economics
            ("development", "Development"),
            ("sectors-economy", "Sectors of the Indian Economy"),
            ("money-credit", "Money and Credit"),
            ("globalisation", "Globalisation and the Indian Economy"),
            ("consumer-rights", "Consumer Rights"),
        ),
    ),
    (
        "hindi-kshitij",
        "Hindi - क्षितिज",
        "🇮🇳",
        "from-yellow-400 to-orange-600",
        (
            ("surdas-ke-pad", "सूरदास के पद"),
            ("ram-lakshman-parsuram-samvad", "राम-लक्ष्मण-परशुराम संवाद"),
            ("savaiye", "सवैये"),
            ("atal-bihari-vajpayee", "आत्मकथ्य"),
            ("ulahna", "उलाहना"),
            ("kanyadan", "कन्यादान"),
            ("chhattrasal", "छत्रसाल"),
            ("parwat-hriday", "पर्वत प्रदेश में पावस"),
            ("top", "तोप"),
            ("kahar", "कहर"),
            ("fag", "फाग"),
            ("netaji-subhash-chandra-bose", "नेताजी का चश्मा"),
            ("balgobin-bhagat", "बालगोबिन भगत"),
            ("lakhnnavi-andaz", "लखनवी अंदाज़"),
            ("manveeya-karuna", "मानवीय करुणा की दिव्य चमक"),
            ("ek-kahani-yah-bhi", "एक कहानी यह भी"),
            ("sapat-sagar", "साना साना हाथ जोड़ि"),
            ("main-kyon-likhta-hun", "मैं क्यों लिखता हूँ"),
        ),
    ),
    (
        "hindi-kritika",
        "Hindi - कृतिका",
        "📝",
        "from-red-400 to-pink-600",
        (
            ("mata-ka-anchal", "माता का आँचल"),
            ("george-pancham-ki-naak", "जॉर्ज पंचम की नाक"),
            ("sana-sana-hath-jodi", "साना साना हाथ जोड़ि"),
            ("ahi-thayya-jinda-hai", "अही ठैयाँ झुलनी हेरानी हो रामा!"),
        ),
    ),
)


def seed_subjects() -> list[Subject]:
    """Fresh copy of the built-in catalog with every chapter incomplete."""
    return [
        Subject(
            id=subject_id,
            name=name,
            icon=icon,
            color=color,
            chapters=[Chapter(id=cid, name=cname) for cid, cname in chapters],
        )
        for subject_id, name, icon, color, chapters in SYLLABUS
    ]
