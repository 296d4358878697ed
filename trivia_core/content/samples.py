"""
Built-in sample content.

Last fallback tier of the repository when neither content document can be
used. Records use the primary document schema so they go through the same
validation as file content.
"""

from __future__ import annotations

SAMPLE_DOCUMENT: dict[str, list[dict]] = {
    "dogBreeds": [
        {
            "id": "sample-breeds-001",
            "category": "Dog Breeds",
            "difficulty": "easy",
            "text": {
                "de": "Welche Hunderasse ist die kleinste der Welt?",
                "en": "Which dog breed is the smallest in the world?",
            },
            "answers": {
                "de": ["Chihuahua", "Dackel", "Mops", "Pudel"],
                "en": ["Chihuahua", "Dachshund", "Pug", "Poodle"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Sie kommt aus Mexiko.", "en": "It comes from Mexico."},
            "funFact": {
                "de": "Chihuahuas wiegen oft weniger als 3 kg.",
                "en": "Chihuahuas often weigh less than 3 kg.",
            },
            "tags": ["chihuahua", "size"],
        },
        {
            "id": "sample-breeds-002",
            "category": "Dog Breeds",
            "difficulty": "easy+",
            "text": {
                "de": "Welche Rasse hat schwarze Punkte auf weißem Fell?",
                "en": "Which breed has black spots on a white coat?",
            },
            "answers": {
                "de": ["Dalmatiner", "Beagle", "Boxer", "Husky"],
                "en": ["Dalmatian", "Beagle", "Boxer", "Husky"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Denk an 101.", "en": "Think of 101."},
            "funFact": {
                "de": "Dalmatinerwelpen werden ganz weiß geboren.",
                "en": "Dalmatian puppies are born completely white.",
            },
            "tags": ["dalmatian", "coat"],
        },
        {
            "id": "sample-breeds-003",
            "category": "Dog Breeds",
            "difficulty": "medium",
            "text": {
                "de": "Welche Rasse wurde für die Rettung in den Alpen bekannt?",
                "en": "Which breed became famous for rescues in the Alps?",
            },
            "answers": {
                "de": ["Bernhardiner", "Mops", "Windhund", "Chow Chow"],
                "en": ["St. Bernard", "Pug", "Greyhound", "Chow Chow"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Ein Hospiz trägt seinen Namen.", "en": "A hospice shares its name."},
            "funFact": {
                "de": "Der Bernhardiner Barry rettete über 40 Menschen.",
                "en": "The St. Bernard Barry rescued more than 40 people.",
            },
            "tags": ["st-bernard", "rescue"],
        },
    ],
    "dogTraining": [
        {
            "id": "sample-training-001",
            "category": "Dog Training",
            "difficulty": "easy",
            "text": {
                "de": "Was belohnt man beim Training am besten sofort?",
                "en": "What should you reward right away during training?",
            },
            "answers": {
                "de": ["Gutes Verhalten", "Bellen", "Springen", "Nichts"],
                "en": ["Good behavior", "Barking", "Jumping", "Nothing"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Lob wirkt Wunder.", "en": "Praise works wonders."},
            "funFact": {
                "de": "Hunde verknüpfen eine Belohnung nur wenige Sekunden lang.",
                "en": "Dogs link a reward to an action for only a few seconds.",
            },
            "tags": ["training", "reward"],
        },
        {
            "id": "sample-training-002",
            "category": "Dog Training",
            "difficulty": "medium",
            "text": {
                "de": "Welches Kommando bringt einen Hund dazu, sich hinzulegen?",
                "en": "Which command asks a dog to lie down?",
            },
            "answers": {
                "de": ["Platz", "Sitz", "Fuß", "Aus"],
                "en": ["Down", "Sit", "Heel", "Drop it"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Der Hund macht sich flach.", "en": "The dog gets flat."},
            "funFact": {
                "de": "Viele Hunde lernen Handzeichen schneller als Wörter.",
                "en": "Many dogs learn hand signals faster than words.",
            },
            "tags": ["training", "command"],
        },
    ],
    "dogBehavior": [
        {
            "id": "sample-behavior-001",
            "category": "Dog Behavior",
            "difficulty": "easy",
            "text": {
                "de": "Warum wedelt ein Hund oft mit dem Schwanz?",
                "en": "Why does a dog often wag its tail?",
            },
            "answers": {
                "de": ["Er ist aufgeregt oder froh", "Er friert", "Er schläft", "Er hat Hunger"],
                "en": ["It is excited or happy", "It is cold", "It is asleep", "It is hungry"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Denk an gute Laune.", "en": "Think of a good mood."},
            "funFact": {
                "de": "Wedeln nach rechts zeigt oft positive Gefühle.",
                "en": "Wagging to the right often shows positive feelings.",
            },
            "tags": ["behavior", "tail"],
        },
        {
            "id": "sample-behavior-002",
            "category": "Dog Behavior",
            "difficulty": "hard",
            "text": {
                "de": "Wie viel besser riecht eine Hundenase als unsere?",
                "en": "How much better is a dog's nose than ours?",
            },
            "answers": {
                "de": ["Bis zu 100.000-mal", "Doppelt so gut", "Gleich gut", "Zehnmal"],
                "en": ["Up to 100,000 times", "Twice as good", "The same", "Ten times"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Es ist eine sehr große Zahl.", "en": "It is a very big number."},
            "funFact": {
                "de": "Hunde haben rund 300 Millionen Riechzellen.",
                "en": "Dogs have about 300 million scent receptors.",
            },
            "tags": ["behavior", "senses", "smell"],
        },
    ],
    "dogHealth": [
        {
            "id": "sample-health-001",
            "category": "Dog Health",
            "difficulty": "easy+",
            "text": {
                "de": "Warum hecheln Hunde?",
                "en": "Why do dogs pant?",
            },
            "answers": {
                "de": ["Um sich abzukühlen", "Um zu bellen", "Um zu fressen", "Aus Langeweile"],
                "en": ["To cool down", "To bark", "To eat", "Out of boredom"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Hunde schwitzen kaum.", "en": "Dogs barely sweat."},
            "funFact": {
                "de": "Hunde schwitzen hauptsächlich über die Pfoten.",
                "en": "Dogs mostly sweat through their paws.",
            },
            "tags": ["health", "temperature"],
        },
        {
            "id": "sample-health-002",
            "category": "Dog Health",
            "difficulty": "expert",
            "text": {
                "de": "Wie lange dauert eine Hundeschwangerschaft ungefähr?",
                "en": "About how long does a dog pregnancy last?",
            },
            "answers": {
                "de": ["Etwa 63 Tage", "Etwa 9 Monate", "Etwa 20 Tage", "Etwa ein Jahr"],
                "en": ["About 63 days", "About 9 months", "About 20 days", "About a year"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Ungefähr zwei Monate.", "en": "Roughly two months."},
            "funFact": {
                "de": "Welpen öffnen ihre Augen nach etwa zwei Wochen.",
                "en": "Puppies open their eyes after about two weeks.",
            },
            "tags": ["health", "pregnancy"],
        },
    ],
    "dogHistory": [
        {
            "id": "sample-history-001",
            "category": "Dog History",
            "difficulty": "medium",
            "text": {
                "de": "Von welchem Tier stammen Hunde ursprünglich ab?",
                "en": "Which animal did dogs originally descend from?",
            },
            "answers": {
                "de": ["Wolf", "Fuchs", "Bär", "Katze"],
                "en": ["Wolf", "Fox", "Bear", "Cat"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Er heult den Mond an.", "en": "It howls at the moon."},
            "funFact": {
                "de": "Hunde leben seit über 15.000 Jahren mit Menschen.",
                "en": "Dogs have lived with people for over 15,000 years.",
            },
            "tags": ["history", "evolution"],
        },
        {
            "id": "sample-history-002",
            "category": "Dog History",
            "difficulty": "hard",
            "text": {
                "de": "Wie viele Chromosomen hat ein Hund?",
                "en": "How many chromosomes does a dog have?",
            },
            "answers": {
                "de": ["78", "46", "24", "100"],
                "en": ["78", "46", "24", "100"],
            },
            "correctAnswerIndex": 0,
            "hint": {"de": "Mehr als ein Mensch.", "en": "More than a human."},
            "funFact": {
                "de": "Menschen haben 46 Chromosomen.",
                "en": "Humans have 46 chromosomes.",
            },
            "tags": ["history", "genetics"],
        },
    ],
}
