"""Named GraphQL queries issued by the content gateway."""

from __future__ import annotations

_FEATURED_IMAGE = """
    featuredImage {
      node {
        sourceUrl
        altText
        mediaDetails {
          width
          height
        }
      }
    }
"""

_AUTHOR_NODE = """
    author {
      node {
        id
        databaseId
        name
        slug
        avatar {
          url
        }
      }
    }
"""

_CATEGORY_NODES = """
    categories(first: 3) {
      nodes {
        id
        databaseId
        name
        slug
      }
    }
"""

_POST_SUMMARY = f"""
    id
    databaseId
    title
    slug
    excerpt
    date
    modified
    {_FEATURED_IMAGE}
    {_AUTHOR_NODE}
    {_CATEGORY_NODES}
"""

_PAGE_INFO = """
    pageInfo {
      hasNextPage
      endCursor
    }
"""

GET_POSTS = f"""
query GetPosts($first: Int = 10, $after: String) {{
  posts(first: $first, after: $after) {{
    nodes {{
      {_POST_SUMMARY}
    }}
    {_PAGE_INFO}
  }}
}}
"""

GET_POSTS_WITH_CONTENT = f"""
query GetPostsWithContent($first: Int = 100) {{
  posts(first: $first) {{
    nodes {{
      {_POST_SUMMARY}
      content
    }}
  }}
}}
"""

GET_POST_BY_SLUG = f"""
query GetPostBySlug($slug: String!) {{
  postBy(slug: $slug) {{
    id
    databaseId
    title
    slug
    content
    excerpt
    date
    modified
    {_FEATURED_IMAGE}
    {_AUTHOR_NODE}
    categories(first: 5) {{
      nodes {{
        id
        databaseId
        name
        slug
      }}
    }}
    tags(first: 10) {{
      nodes {{
        id
        databaseId
        name
        slug
      }}
    }}
  }}
}}
"""

GET_POSTS_BY_CATEGORY = f"""
query GetPostsByCategory($slug: ID!, $first: Int = 10, $after: String) {{
  category(id: $slug, idType: SLUG) {{
    id
    databaseId
    name
    slug
    description
    posts(first: $first, after: $after) {{
      nodes {{
        {_POST_SUMMARY}
      }}
      {_PAGE_INFO}
    }}
  }}
}}
"""

GET_CATEGORIES = f"""
query GetCategories($first: Int = 20) {{
  categories(first: $first) {{
    nodes {{
      id
      databaseId
      name
      slug
      description
      posts(first: 3) {{
        nodes {{
          {_POST_SUMMARY}
        }}
      }}
    }}
  }}
}}
"""

GET_AUTHOR = f"""
query GetAuthor($slug: String!) {{
  userBy(slug: $slug) {{
    id
    databaseId
    name
    slug
    description
    avatar {{
      url
    }}
    posts(first: 10) {{
      nodes {{
        id
        databaseId
        title
        slug
        excerpt
        date
        {_FEATURED_IMAGE}
      }}
    }}
  }}
}}
"""

GET_TAG = f"""
query GetTag($slug: ID!) {{
  tag(id: $slug, idType: SLUG) {{
    id
    databaseId
    name
    slug
    description
    posts(first: 10) {{
      nodes {{
        id
        databaseId
        title
        slug
        excerpt
        date
        {_FEATURED_IMAGE}
      }}
    }}
  }}
}}
"""

# The posts connection cannot exclude ids; exclusion happens after the fetch.
GET_RELATED_POSTS = f"""
query GetRelatedPosts($categoryId: Int!, $first: Int = 4) {{
  posts(first: $first, where: {{ categoryId: $categoryId }}) {{
    nodes {{
      id
      databaseId
      title
      slug
      excerpt
      date
      {_FEATURED_IMAGE}
    }}
  }}
}}
"""

SEARCH_POSTS = f"""
query SearchPosts($search: String!, $first: Int = 20) {{
  posts(first: $first, where: {{ search: $search }}) {{
    nodes {{
      id
      databaseId
      title
      slug
      excerpt
      date
      {_FEATURED_IMAGE}
    }}
  }}
}}
"""

GET_ALL_POSTS_SLUGS = """
query GetAllPostsSlugs($first: Int = 100, $after: String) {
  posts(first: $first, after: $after) {
    nodes {
      id
      slug
      date
      modified
      title
      categories(first: 1) {
        nodes {
          id
          slug
        }
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

GET_ALL_CATEGORIES_SLUGS = """
query GetAllCategoriesSlugs($first: Int = 100) {
  categories(first: $first) {
    nodes {
      slug
    }
  }
}
"""

GET_ALL_AUTHORS_SLUGS = """
query GetAllAuthorsSlugs($first: Int = 100) {
  users(first: $first) {
    nodes {
      slug
    }
  }
}
"""

GET_ALL_TAGS_SLUGS = """
query GetAllTagsSlugs($first: Int = 100) {
  tags(first: $first) {
    nodes {
      slug
    }
  }
}
"""
