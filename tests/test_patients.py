import pytest

from vetclinic.core.exceptions import NotFoundError
from vetclinic.api.v1.patients.schemas import PetCreate


@pytest.mark.integration
class TestPatientDirectory:

    @pytest.mark.parametrize("term", ["bud", "SMITH", "golden", "98511"])
    def test_search_matches_name_owner_breed_microchip(self, directory, buddy, luna, term):
        assert [p.name for p in directory.search(term)] == ["Buddy"]

    def test_search_needs_two_characters(self, directory, buddy):
        assert directory.search("b") == []
        assert directory.search("  ") == []

    @pytest.mark.parametrize("term", ["__", "%%", "_%", "\\%"])
    def test_search_wildcards_match_literally(self, directory, buddy, luna, term):
        assert directory.search(term) == []

    def test_search_literal_underscore(self, directory, buddy):
        directory.register_pet(PetCreate(name="Mr_Whiskers", species="Cat", owner_name="Ana Lopez"))

        assert [p.name for p in directory.search("r_w")] == ["Mr_Whiskers"]

    def test_search_limit(self, directory, buddy, luna):
        directory.register_pet(PetCreate(name="Bubbles", species="Fish", owner_name="Ana Lopez"))

        assert [p.name for p in directory.search("bu")] == ["Bubbles", "Buddy"]
        assert len(directory.search("bu", limit=1)) == 1

    def test_references_for(self, directory, buddy, doctor):
        pet, owner, vet = directory.references_for(buddy.id, doctor.id)

        assert pet.name == "Buddy"
        assert pet.breed == "Golden Retriever"
        assert owner.id == buddy.owner_id
        assert owner.phone == "555-0101"
        assert vet.name == "Dr. Sarah Wilson"

    def test_unknown_pet(self, directory, doctor):
        with pytest.raises(NotFoundError):
            directory.references_for("missing", doctor.id)

    def test_list_doctors(self, directory, doctor):
        assert [d.name for d in directory.list_doctors()] == ["Dr. Sarah Wilson"]
