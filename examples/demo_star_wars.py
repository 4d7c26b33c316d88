#!/usr/bin/env python3
"""Demonstration of shape-driven queries.

This script shows how to:
1. Declare shapes for a query
2. Compile them into query text
3. Bind a response back onto the shapes

Note: This demo doesn't make real API calls - the response is canned.
"""

import json

from gql_shape.core import (
    Connection,
    ID,
    Query,
    Shape,
    ShapeField,
    unmarshal,
)


class Friend(Shape):
    fields = (ShapeField("Name", str),)


class FriendEdge(Shape):
    fields = (
        ShapeField("Node", Friend),
        ShapeField("Cursor", str),
    )


class FriendsConnection(Shape):
    fields = (
        ShapeField("Edges", list[FriendEdge]),
        ShapeField("Connection", Connection),
    )


class Hero(Shape):
    fields = (
        ShapeField("ID", ID),
        ShapeField("Name", str),
        ShapeField("FriendsConnection", FriendsConnection, "first: $first"),
    )


class HeroQuery(Shape):
    fields = (ShapeField("Hero", Hero, "episode: $episode"),)


RESPONSE = {
    "data": {
        "hero": {
            "id": "SHVtYW46MjAwMQ==",
            "name": "R2-D2",
            "friendsConnection": {
                "totalCount": 3,
                "edges": [
                    {"node": {"name": "Han Solo"}, "cursor": "Y3Vyc29yMg=="},
                    {"node": {"name": "Leia Organa"}, "cursor": "Y3Vyc29yMw=="},
                ],
                "pageInfo": {"hasNextPage": True, "endCursor": "Y3Vyc29yMw=="},
            },
        }
    }
}


def main():
    print("=== Shape Query Demo ===\n")

    query = (
        Query("HeroFriends", HeroQuery)
        .define_variable("episode", "Episode")
        .define_variable("first", "Int")
    )

    print("1. Compiled query:")
    print(query.compile())

    print("2. Request body:")
    print(json.dumps(query.request_body({"episode": "EMPIRE", "first": 2}), indent=2))

    print("\n3. Bound response:")
    result = unmarshal(json.dumps(RESPONSE), HeroQuery())
    hero = result.hero
    print(f"   {hero.name} (id {hero.id})")
    conn = hero.friends_connection
    print(f"   {len(conn.edges)} of {conn.total_count} friends, more: {conn.page_info.has_next_page}")
    for edge in conn.edges:
        print(f"   - {edge.node.name} [{edge.cursor}]")


if __name__ == "__main__":
    main()
