def test_list_authors_is_distinct(client, create_book):
    create_book(title="Dune", author="Frank Herbert")
    create_book(title="Dune Messiah", author="Frank Herbert", published_year=1969)
    create_book(title="Foundation", author="Isaac Asimov", published_year=1951)

    response = client.get("/authors")
    assert response.status_code == 200
    authors = response.json()
    assert sorted(row["author"] for row in authors) == ["Frank Herbert", "Isaac Asimov"]
    assert all(set(row) == {"author"} for row in authors)


def test_list_authors_empty(client):
    response = client.get("/authors")
    assert response.status_code == 200
    assert response.json() == []


def test_get_author_by_id(client, add_author):
    author_id = add_author("Ursula K. Le Guin", "American author of speculative fiction")
    response = client.get(f"/authors/{author_id}")
    assert response.status_code == 200
    assert response.json() == {
        "id": author_id,
        "name": "Ursula K. Le Guin",
        "biography": "American author of speculative fiction",
    }


def test_get_missing_author(client):
    response = client.get("/authors/12345")
    assert response.status_code == 404
    assert response.json() == {"error": "Author not found"}
